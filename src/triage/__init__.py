"""Cybermesh Triage — conversational incident triage engine.

Modules
───────
  store        — Incident Store: alert, hosts, system status
  resolver     — ordered keyword rules: operator text → Intent
  responses    — reply templates and suggested actions
  executor     — Intent → mutation / AsyncJob → assistant Turn
  conversation — append-only Conversation Log
  tracker      — single-slot Async Action Tracker
  backend      — remediation backend interface (simulated)
  seed         — build the initial incident from incident.yaml
  session      — serialised orchestration + presentation snapshot
  cli          — argparse entry-point / interactive console
"""
