#!/usr/bin/env python3
"""
Smoke test for the checkout relay: health, checkout creation, verification, cancellation.

Start the relay first (in another terminal), ideally against the mock processor:
  cd /path/to/relay
  INTEGRATIONS_MODE=mock python -m src.api.main

Then run this script:
  python scripts/smoke_checkout_api.py
  python scripts/smoke_checkout_api.py --base-url http://127.0.0.1:3000 --user-id test-user-1

If you see "Connection refused", the relay is not running; start it as above.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict

import requests


def post_json(url: str, data: Dict[str, Any], timeout: int = 30) -> Dict[str, Any]:
    r = requests.post(url, json=data, timeout=timeout)
    r.raise_for_status()
    return r.json()


def get_json(url: str, timeout: int = 30) -> Dict[str, Any]:
    r = requests.get(url, timeout=timeout)
    r.raise_for_status()
    return r.json()


def main() -> int:
    parser = argparse.ArgumentParser(description="Smoke test the checkout relay")
    parser.add_argument("--base-url", default="http://localhost:3000", help="Relay base URL")
    parser.add_argument("--user-id", default="smoke-user-001", help="User identifier")
    args = parser.parse_args()
    base = args.base_url.rstrip("/")
    user_id = args.user_id

    print("=== Checkout relay smoke test ===\n")
    print(f"Base URL: {base}")
    print(f"User ID:  {user_id}\n")

    # 1) Health
    print("1) GET /health")
    try:
        out = get_json(f"{base}/health")
        print(f"   status={out.get('status')} timestamp={out.get('timestamp')}\n")
    except requests.RequestException as e:
        print(f"   FAIL: {e}")
        if "Connection refused" in str(e) or "Failed to establish" in str(e):
            print("   → Start the relay first: INTEGRATIONS_MODE=mock python -m src.api.main")
        return 1

    # 2) Activity upgrade checkout
    print("2) POST /create-checkout-session (activity_upgrade)")
    try:
        out = post_json(
            f"{base}/create-checkout-session",
            {
                "userId": user_id,
                "type": "activity_upgrade",
                "items": [
                    {"title": "Hot Air Balloon Safari", "quantity": 2, "price": 349.99},
                    {"title": "Maasai Village Visit", "quantity": 1, "price": 25},
                ],
            },
        )
        session_id = out["id"]
        print(f"   session_id: {session_id}")
        print(f"   redirect:   {out.get('url')}\n")
    except requests.RequestException as e:
        print(f"   FAIL: {e}")
        if hasattr(e, "response") and e.response is not None:
            print(f"   body: {e.response.text[:500]}")
        return 1

    # 3) Verify (a fresh session is expected to be unpaid)
    print("3) POST /verify-payment")
    try:
        out = post_json(f"{base}/verify-payment", {"sessionId": session_id})
        print(f"   paid={out.get('paid')} status={out.get('status')} metadata={out.get('metadata')}\n")
    except requests.RequestException as e:
        print(f"   FAIL: {e}\n")
        return 1

    # 4) Cancellation acknowledgement
    print("4) POST /handle-cancellation")
    try:
        out = post_json(f"{base}/handle-cancellation", {"userId": user_id})
        print(f"   message={out.get('message')}\n")
    except requests.RequestException as e:
        print(f"   FAIL: {e}\n")
        return 1

    # 5) Client misuse is rejected
    print("5) GET /create-checkout-session (expect 405)")
    r = requests.get(f"{base}/create-checkout-session", timeout=30)
    if r.status_code != 405:
        print(f"   FAIL: expected 405, got {r.status_code}\n")
        return 1
    print(f"   error={r.json().get('error')}\n")

    print("=== All steps completed successfully ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
