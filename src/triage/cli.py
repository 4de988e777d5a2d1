"""Консоль оператора Cybermesh Triage.

Usage examples
--------------
# Interactive console (wall clock, background ticker):
python -m src.triage --config config/incident.yaml

# Batch run, let the last job finish, dump the final state:
python -m src.triage -c "show active alerts" -c "block ip 172.24.1.250" \\
    --wait --snapshot-out out/snapshot.json
"""

from __future__ import annotations

import argparse
import logging
import threading
from pathlib import Path

from src.contracts.enums import Role
from src.contracts.turn import Turn
from src.shared.logger import setup_logging
from src.triage.session import TriageSession

log = logging.getLogger(__name__)

_EXIT_WORDS = {"exit", "quit", ":q"}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cybermesh-triage",
        description="Cybermesh Triage — drive a live incident with short natural-language commands",
    )
    p.add_argument(
        "--config",
        default="config/incident.yaml",
        help="Incident seed (alert, hosts, durations). Default: config/incident.yaml",
    )
    p.add_argument(
        "-c", "--command",
        action="append",
        default=[],
        help="Run this command non-interactively. Repeatable; executed in order.",
    )
    p.add_argument(
        "--wait",
        action="store_true",
        default=False,
        help="In batch mode, wait for the in-flight job to finish before exiting.",
    )
    p.add_argument(
        "--tick-interval-ms",
        type=int,
        default=250,
        help="How often the console checks for finished jobs, ms (default: 250).",
    )
    p.add_argument(
        "--snapshot-out",
        default=None,
        help="Write the final state snapshot as JSON to this path.",
    )
    p.add_argument(
        "--log-file",
        default=None,
        help="Send logs to this file instead of stderr.",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: WARNING",
    )
    return p


def _print_turn(turn: Turn, out=None) -> None:
    print(f"\n[{turn.timestamp}] GUARDIAN AI:\n{turn.text}", file=out)
    for a in turn.suggested_actions:
        print(f"  ({a.kind}) {a.label}: {a.command}", file=out)


def _run_batch(session: TriageSession, commands: list[str], wait: bool) -> None:
    for cmd in commands:
        print(f"\n> {cmd}")
        for turn in session.tick():
            _print_turn(turn)
        _print_turn(session.handle(cmd))
    if wait:
        for turn in session.drain():
            _print_turn(turn)


class _TurnPrinter:
    """Prints every non-operator turn exactly once, from either thread."""

    def __init__(self, session: TriageSession) -> None:
        self._session = session
        self._seen = len(session.conversation)
        self._lock = threading.Lock()

    def flush(self, _turn: Turn | None = None) -> None:
        with self._lock:
            turns = self._session.conversation.turns()
            for turn in turns[self._seen:]:
                if turn.role != Role.OPERATOR.value:
                    _print_turn(turn)
            self._seen = len(turns)


def _run_console(session: TriageSession, interval_ms: int) -> None:
    printer = _TurnPrinter(session)
    session.start_ticker(interval_ms / 1000.0, on_turn=printer.flush)
    print("Type a command ('help' for the list, 'exit' to leave).")
    try:
        while True:
            try:
                line = input("\n> ")
            except EOFError:
                break
            if line.strip().lower() in _EXIT_WORDS:
                break
            session.handle(line)
            printer.flush()
    except KeyboardInterrupt:
        print("\nInterrupted.")
    finally:
        session.stop_ticker()
    # completions that landed after the last prompt
    session.tick()
    printer.flush()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    session = TriageSession.from_config(args.config)
    snap = session.snapshot()
    print(f"{snap.status_label} | alert {snap.alert.id} [{snap.alert.severity.upper()}] {snap.alert.title}")
    _print_turn(snap.conversation_log[0])

    if args.command:
        _run_batch(session, args.command, args.wait)
    else:
        _run_console(session, args.tick_interval_ms)

    final = session.snapshot()
    print(f"\n{final.status_label} | in flight: {final.progress_label or '-'}")
    if args.snapshot_out:
        out = Path(args.snapshot_out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(final.to_json(indent=2), encoding="utf-8")
        log.info("Snapshot written to %s", out)


if __name__ == "__main__":
    main()
