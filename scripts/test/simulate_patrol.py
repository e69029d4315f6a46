# scripts/test/simulate_patrol.py
"""
Drive a running backend the way an officer's device does: plate lookups,
tickets, warnings, and an offline batch followed by a sync.
Usage: python scripts/test/simulate_patrol.py --officer <id> --action lookup --plate ABC123
"""

import argparse
import requests
import uuid
from datetime import datetime, timedelta, timezone

BACKEND_URL = "http://localhost:8080/api"


def show(label, resp):
    body = resp.json()
    mark = "✅" if body.get("success") else "❌"
    print(f"{mark} {label} → HTTP {resp.status_code}: {body.get('data') or body.get('error')}")
    return body


def simulate_lookup(officer, plate, state):
    resp = requests.get(f"{BACKEND_URL}/enforcement/license-plates/{plate}",
                        params={"state_province": state, "officer_id": officer}, timeout=10)
    body = show(f"lookup {plate}/{state}", resp)
    if body.get("success"):
        data = body["data"]
        print(f"   status={data['current_status']} action={data['recommended_action']}")


def simulate_ticket(officer, plate, state):
    resp = requests.post(f"{BACKEND_URL}/enforcement/tickets", json={
        "license_plate": plate, "state_province": state, "issued_by": officer,
        "violation_type": "no_permit", "violation_reason": "Simulated patrol ticket",
        "fine_amount": 50.0,
    }, timeout=10)
    show(f"ticket {plate}/{state}", resp)


def simulate_warning(officer, plate, state):
    resp = requests.post(f"{BACKEND_URL}/enforcement/warnings", json={
        "license_plate": plate, "state_province": state, "issued_by": officer,
        "warning_type": "courtesy", "warning_reason": "Simulated patrol warning",
    }, timeout=10)
    show(f"warning {plate}/{state}", resp)


def simulate_offline(officer, plate, state):
    """Queue a scan then a ticket captured minutes apart, then reconcile."""
    captured = datetime.now(timezone.utc) - timedelta(minutes=20)
    batch = [
        ("scan", {"license_plate": plate, "state_province": state, "result": "no_permit"}),
        ("ticket", {"license_plate": plate, "state_province": state, "violation_type": "no_permit",
                    "violation_reason": "Captured offline"}),
    ]
    for offset, (action_type, data) in enumerate(batch):
        data["id"] = str(uuid.uuid4())
        resp = requests.post(f"{BACKEND_URL}/enforcement/sync/queue", json={
            "officer_id": officer, "action_type": action_type, "action_data": data,
            "performed_at": (captured + timedelta(minutes=offset)).isoformat(),
        }, timeout=10)
        show(f"queue {action_type}", resp)

    resp = requests.post(f"{BACKEND_URL}/enforcement/sync/process", json={"officer_id": officer}, timeout=30)
    show("sync", resp)


if __name__ == "__main__":
    actions = {
        "lookup": simulate_lookup,
        "ticket": simulate_ticket,
        "warning": simulate_warning,
        "offline": simulate_offline,
    }
    parser = argparse.ArgumentParser(description="Simulate officer patrol traffic for testing")
    parser.add_argument("--action", default="lookup", choices=list(actions.keys()))
    parser.add_argument("--officer", required=True)
    parser.add_argument("--plate", default="ABC123")
    parser.add_argument("--state", default="CA")
    parser.add_argument("--url", default=BACKEND_URL)
    args = parser.parse_args()

    BACKEND_URL = args.url
    actions[args.action](args.officer, args.plate, args.state)
