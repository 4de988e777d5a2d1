"""Tests for src.triage.cli — batch mode."""

from __future__ import annotations

import json
from pathlib import Path

from src.triage.cli import _run_console, build_parser, main

REPO_CONFIG = str(Path(__file__).resolve().parent.parent / "config" / "incident.yaml")


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.config == "config/incident.yaml"
        assert args.command == []
        assert args.wait is False

    def test_repeated_commands(self):
        args = build_parser().parse_args(["-c", "show origin", "--command", "ioc"])
        assert args.command == ["show origin", "ioc"]


class TestBatch:
    def test_read_only_batch(self, capsys, tmp_path):
        out = tmp_path / "snap.json"
        main(["--config", REPO_CONFIG, "-c", "show active alerts", "-c", "ioc for alert 123",
              "--snapshot-out", str(out)])
        printed = capsys.readouterr().out
        assert "THREAT ACTIVE" in printed
        assert "INDICATORS OF COMPROMISE" in printed
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["system_status"] == "threat"
        assert len(data["conversation_log"]) == 5


class TestConsole:
    @staticmethod
    def _feed(monkeypatch, lines, before_exit=None):
        pending = iter(lines)

        def fake_input(_prompt=""):
            line = next(pending)
            if line == "exit" and before_exit is not None:
                before_exit()
            return line

        monkeypatch.setattr("builtins.input", fake_input)

    def test_completion_after_last_prompt_is_printed(self, session, clock, capsys, monkeypatch):
        self._feed(monkeypatch, ["block ip 172.24.1.250", "exit"],
                   before_exit=lambda: clock.advance(3000))
        _run_console(session, interval_ms=60_000)
        printed = capsys.readouterr().out
        assert "INITIATING NETWORK-WIDE BLOCK" in printed
        assert printed.count("NETWORK BLOCK COMPLETE") == 1
        assert session.snapshot().system_status == "secure"

    def test_eof_leaves_console(self, session, capsys, monkeypatch):
        def eof(_prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", eof)
        _run_console(session, interval_ms=60_000)
        assert "GUARDIAN AI" not in capsys.readouterr().out
