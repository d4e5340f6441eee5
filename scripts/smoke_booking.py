#!/usr/bin/env python3
"""Walk a running SpinBook server through availability -> booking -> availability."""

from __future__ import annotations

import argparse
import sys
from typing import Any

import httpx
from httpx import ConnectError


def show(title: str, response: httpx.Response) -> Any:
    print("=" * 60)
    print(title)
    print("=" * 60)
    print(f"Status: {response.status_code}")
    data = response.json() if response.content else None
    print(f"Body: {data}\n")
    return data


def main() -> None:
    parser = argparse.ArgumentParser(description="Smoke-test the SpinBook booking flow")
    parser.add_argument("--base-url", default="http://127.0.0.1:8001")
    parser.add_argument("--date", default="2025-03-10")
    parser.add_argument("--slots", default="17,18", help="Comma separated hours")
    parser.add_argument("--name", default="Ana")
    parser.add_argument("--email", default="ana@x.com")
    parser.add_argument("--phone", default="+56911112222")
    parser.add_argument("--config", action="store_true", help="Also call /api/test-config")
    args = parser.parse_args()

    slots = [int(s) for s in args.slots.split(",") if s.strip()]
    client = httpx.Client(base_url=args.base_url, timeout=15.0)

    try:
        client.get("/health")
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn spinbook.main:app --reload --port 8001")
        sys.exit(1)

    if args.config:
        show("GET /api/test-config", client.get("/api/test-config"))

    show(f"GET /api/get-events?date={args.date}", client.get("/api/get-events", params={"date": args.date}))

    payload = {
        "date": args.date,
        "slots": slots,
        "userData": {"name": args.name, "email": args.email, "phone": args.phone},
    }
    booking = show("POST /api/create-event", client.post("/api/create-event", json=payload))
    if booking and "bookingId" in booking:
        print(f"Booking ID: {booking['bookingId']}\n")

    show(f"GET /api/get-events?date={args.date} (after booking)", client.get("/api/get-events", params={"date": args.date}))
    show("POST /api/create-event (same slots again)", client.post("/api/create-event", json=payload))


if __name__ == "__main__":
    main()
