"""End-to-end tests: operator text → resolver → executor → tracker → snapshot."""

from __future__ import annotations

import json
import threading

from src.triage.responses import HELP_TEXT


class TestOpening:
    def test_greeting_is_first_turn(self, session):
        snap = session.snapshot()
        assert len(snap.conversation_log) == 1
        first = snap.conversation_log[0]
        assert first.role == "assistant"
        assert "CYBERMESH ALERT" in first.text
        assert [a.label for a in first.suggested_actions] == [
            "BLOCK C2 IP", "ISOLATE PATIENT ZERO", "START REMEDIATION",
        ]

    def test_initial_snapshot(self, session):
        snap = session.snapshot()
        assert snap.alert.status == "active"
        assert snap.system_status == "threat"
        assert snap.status_label == "THREAT ACTIVE"
        assert snap.in_flight_job_kind is None
        assert snap.progress_label is None


class TestHandle:
    def test_appends_operator_and_assistant_turns(self, session):
        reply = session.handle("  show active alerts ")
        turns = session.snapshot().conversation_log
        assert [t.role for t in turns[-2:]] == ["operator", "assistant"]
        assert turns[-2].text == "show active alerts"
        assert turns[-1] == reply

    def test_blank_input_gets_help_without_operator_turn(self, session):
        reply = session.handle("   ")
        assert reply.text == HELP_TEXT
        assert [t.role for t in session.snapshot().conversation_log] == ["assistant", "assistant"]

    def test_unrecognized_gets_help(self, session):
        assert session.handle("what time is it").text == HELP_TEXT

    def test_yes_follows_last_suggestion(self, session, clock):
        session.handle("show origin")
        reply = session.handle("yes")
        assert "ISOLATING HOST" in reply.text
        assert session.snapshot().in_flight_job_kind == "isolating"

    def test_foreign_ip_does_not_swallow_isolate(self, session, backend):
        reply = session.handle("block ip 10.0.0.9 and isolate host wkstn-hr-01")
        assert "ISOLATING HOST" in reply.text
        assert session.snapshot().in_flight_job_kind == "isolating"
        assert [c.action for c in backend.calls] == ["isolate_host"]

    def test_host_without_playbook_falls_through_to_iocs(self, session):
        reply = session.handle("isolate host wkstn-fin-03 ioc")
        assert "INDICATORS OF COMPROMISE" in reply.text
        assert session.snapshot().in_flight_job_kind is None


class TestBlockIpCompletion:
    def test_resolves_exactly_at_duration(self, session, clock):
        session.handle("block ip 172.24.1.250")
        assert session.snapshot().in_flight_job_kind == "blocking"
        assert session.snapshot().progress_label == "EXECUTING NETWORK BLOCK..."

        clock.advance(2999)
        assert session.tick() == []
        snap = session.snapshot()
        assert (snap.alert.status, snap.system_status) == ("active", "threat")

        clock.advance(1)
        done = session.tick()
        assert len(done) == 1
        assert "NETWORK BLOCK COMPLETE" in done[0].text
        snap = session.snapshot()
        assert (snap.alert.status, snap.system_status) == ("resolved", "secure")
        assert snap.status_label == "CYBERMESH SECURE"
        assert snap.in_flight_job_kind is None

    def test_completion_applied_before_next_command(self, session, clock):
        session.handle("block ip 172.24.1.250")
        clock.advance(3000)
        reply = session.handle("show active alerts")
        assert "Active Alerts (0)" in reply.text
        texts = [t.text for t in session.snapshot().conversation_log]
        assert any("NETWORK BLOCK COMPLETE" in t for t in texts[:-2])


class TestIsolateCompletion:
    def test_only_target_host_changes(self, session, clock):
        before = {h.hostname: h.status for h in session.snapshot().hosts}
        session.handle("isolate host WKSTN-HR-01")
        clock.advance(2000)
        session.tick()
        after = {h.hostname: h.status for h in session.snapshot().hosts}
        assert after["WKSTN-HR-01"] == "isolated"
        changed = {k for k in after if after[k] != before[k]}
        assert changed == {"WKSTN-HR-01"}

    def test_vanished_host_is_a_logged_noop(self, session, clock, caplog):
        session.handle("isolate host WKSTN-HR-01")
        # simulate inventory drift between submit and completion
        session.store._hosts.pop("1")
        clock.advance(2000)
        with caplog.at_level("WARNING"):
            assert session.tick() == []
        assert "Dropped completion" in caplog.text
        assert session.snapshot().in_flight_job_kind is None


class TestRemediationScenario:
    def test_busy_then_investigating(self, session, clock, backend):
        reply = session.handle("start automated remediation playbook")
        assert "AUTOMATED REMEDIATION INITIATED" in reply.text
        job = session.tracker.in_flight
        assert (job.kind, job.duration_ms) == ("remediating", 5000)

        busy = session.handle("block ip 172.24.1.250")
        assert "ACTION IN PROGRESS" in busy.text
        assert session.tracker.in_flight is job
        snap = session.snapshot()
        assert snap.alert.status == "active"
        assert snap.system_status == "threat"
        assert len(backend.calls) == 1

        clock.advance(5000)
        session.tick()
        snap = session.snapshot()
        assert snap.system_status == "investigating"
        assert snap.status_label == "ANALYZING THREAT"
        assert snap.alert.status == "investigating"

    def test_block_after_remediation_keeps_investigating(self, session, clock):
        session.handle("start automated remediation playbook")
        clock.advance(5000)
        session.handle("block ip 172.24.1.250 network-wide")
        clock.advance(3000)
        session.tick()
        snap = session.snapshot()
        assert snap.alert.status == "resolved"
        assert snap.system_status == "investigating"


class TestOrdering:
    def test_timestamps_non_decreasing(self, session, clock):
        for text in ["show active alerts", "block ip 172.24.1.250", "ioc", "show origin"]:
            session.handle(text)
            clock.advance(700)
        session.drain()
        stamps = [t.timestamp for t in session.snapshot().conversation_log]
        assert stamps == sorted(stamps)
        ids = [t.id for t in session.snapshot().conversation_log]
        assert ids == sorted(ids)


class TestDrain:
    def test_manual_clock_jumps_to_due(self, session, clock):
        session.handle("isolate host WKSTN-HR-01")
        turns = session.drain()
        assert len(turns) == 1
        assert "isolated successfully" in turns[0].text
        assert not session.tracker.busy

    def test_idle_drain(self, session):
        assert session.drain() == []


class TestSnapshot:
    def test_is_a_copy(self, session):
        snap = session.snapshot()
        snap.alert.status = "resolved"
        snap.hosts[0].status = "clean"
        assert session.store.get_alert().status == "active"
        assert session.store.get_host("1").status == "infected"

    def test_json(self, session):
        session.handle("block ip 172.24.1.250")
        data = json.loads(session.snapshot().to_json())
        assert set(data) >= {
            "alert", "hosts", "conversation_log", "system_status", "in_flight_job_kind",
        }
        assert data["in_flight_job_kind"] == "blocking"
        assert data["alert"]["ip"] == "172.24.1.250"
        assert len(data["hosts"]) == 4
        assert data["conversation_log"][-1]["role"] == "assistant"


class TestSerialisation:
    def test_concurrent_handle_and_tick(self, session, clock):
        session.handle("block ip 172.24.1.250")
        clock.advance(3000)
        errors: list[BaseException] = []

        def ticker():
            try:
                for _ in range(200):
                    session.tick()
            except BaseException as exc:  # pragma: no cover - surfaced below
                errors.append(exc)

        t = threading.Thread(target=ticker)
        t.start()
        for _ in range(50):
            session.handle("show active alerts")
        t.join()

        assert errors == []
        completions = [t for t in session.snapshot().conversation_log
                       if "NETWORK BLOCK COMPLETE" in t.text]
        assert len(completions) == 1

    def test_background_ticker(self, session, clock):
        delivered = []
        session.handle("isolate host WKSTN-HR-01")
        clock.advance(2000)
        session.start_ticker(0.01, on_turn=delivered.append)
        try:
            for _ in range(500):
                if not session.tracker.busy:
                    break
                threading.Event().wait(0.01)
        finally:
            session.stop_ticker()
        assert session.store.get_host("1").status == "isolated"
        assert [t.text for t in delivered] == [session.conversation.last().text]
        assert "ISOLATED" in delivered[0].text.upper()
