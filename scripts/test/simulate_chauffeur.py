# scripts/test/simulate_chauffeur.py
"""Play the chauffeur app against a running backend: answer trip offers or finish signup."""

import argparse
import requests

BACKEND_URL = "http://localhost:8080/api/v1"


def answer_offer(trip_id, action, chauffeur_id=None, reason=None, api_key=None):
    payload = {"chauffeur_id": chauffeur_id}
    if reason:
        payload["reason"] = reason
    resp = requests.post(f"{BACKEND_URL}/trips/{trip_id}/{action}", json=payload,
                         headers={"X-API-Key": api_key} if api_key else {}, timeout=10)
    body = resp.json()
    if resp.ok:
        print(f"✅ {action} trip {trip_id} → {body['dispatch_status']}")
    else:
        print(f"❌ {action} trip {trip_id} → HTTP {resp.status_code}: {body.get('detail')}")


def complete_signup(chauffeur_id, api_key=None):
    resp = requests.put(f"{BACKEND_URL}/chauffeurs/{chauffeur_id}/signup",
                        headers={"X-API-Key": api_key} if api_key else {}, timeout=10)
    print(f"{'✅' if resp.ok else '❌'} signup {chauffeur_id} → HTTP {resp.status_code}: {resp.json()}")


def list_open_offers(api_key=None):
    resp = requests.get(f"{BACKEND_URL}/trips", params={"dispatch_status": "Awaiting Acceptance"},
                        headers={"X-API-Key": api_key} if api_key else {}, timeout=10)
    resp.raise_for_status()
    for trip in resp.json():
        print(f"  {trip['id']}  {trip['trip_name']:<30} → {trip['offered_to_chauffeur_id']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate chauffeur app responses")
    parser.add_argument("action", choices=["accept", "reject", "signup", "offers"])
    parser.add_argument("--trip")
    parser.add_argument("--chauffeur")
    parser.add_argument("--reason")
    parser.add_argument("--url", default=BACKEND_URL)
    parser.add_argument("--api-key")
    args = parser.parse_args()
    BACKEND_URL = args.url.rstrip("/")

    if args.action == "offers":
        list_open_offers(args.api_key)
    elif args.action == "signup":
        complete_signup(args.chauffeur, args.api_key)
    else:
        answer_offer(args.trip, args.action, args.chauffeur, args.reason, args.api_key)
