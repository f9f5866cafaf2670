#!/usr/bin/env python3
"""Smoke test against a running deployment. Verifies /health, /, /status and /cleanup shapes.

Run with: python scripts/smoke_prod.py
Requires: API running at API_BASE. Step 2 calls Google Books once on a cold cache.
"""

import os
import sys

import requests

API_BASE = os.getenv("API_BASE", "http://localhost:8000").rstrip("/")
BOOK_TITLE = os.getenv("SMOKE_BOOK_TITLE", "Dune")
AUTHOR_NAME = os.getenv("SMOKE_AUTHOR_NAME", "Frank Herbert")

STATUS_FIELDS = {"database", "entries", "age_distribution", "configuration", "cleanup_estimation"}


def _get(path: str, params: dict | None = None) -> requests.Response:
    return requests.get(f"{API_BASE}{path}", params=params, timeout=30)


def _ok(resp: requests.Response) -> bool:
    return resp.status_code == 200


def main() -> int:
    failures: list[str] = []

    # 1. GET /health => ok true
    print("1. GET /health ...")
    try:
        r = _get("/health")
        if not _ok(r) or not r.json().get("ok"):
            failures.append(f"/health => {r.status_code} {r.text[:200]}")
        else:
            print("   ok")
    except requests.RequestException as e:
        failures.append(f"/health => {e}")
        print(f"   FAIL: {e}")
        return 1

    # 2. Same lookup twice; second must come from cache
    print("2. GET / twice ...")
    params = {"book_title": BOOK_TITLE, "author_name": AUTHOR_NAME}
    try:
        r1 = _get("/", params)
        r2 = _get("/", {"book_title": BOOK_TITLE.upper(), "author_name": AUTHOR_NAME.lower()})
        if not _ok(r1) or not _ok(r2):
            failures.append(f"/ => {r1.status_code}, {r2.status_code}")
        elif r2.json().get("source") != "cache":
            failures.append(f"/ second call source={r2.json().get('source')!r}, expected 'cache'")
        elif r1.json().get("description") != r2.json().get("description"):
            failures.append("/ second call description differs from first")
        else:
            print(f"   ok (first source={r1.json().get('source')})")
    except requests.RequestException as e:
        failures.append(f"/ => {e}")

    # 3. Missing parameter => 400
    print("3. GET / without author_name ...")
    try:
        r = _get("/", {"book_title": BOOK_TITLE})
        if r.status_code != 400:
            failures.append(f"/ missing param => {r.status_code}, expected 400")
        else:
            print("   400 ok")
    except requests.RequestException as e:
        failures.append(f"/ missing param => {e}")

    # 4. GET /status => full report
    print("4. GET /status ...")
    try:
        r = _get("/status")
        if not _ok(r):
            failures.append(f"/status => {r.status_code}")
        else:
            data = r.json()
            missing = STATUS_FIELDS - set(data)
            if missing:
                failures.append(f"/status missing {sorted(missing)}")
            else:
                print(f"   ok total={data['entries']['total']}")
    except requests.RequestException as e:
        failures.append(f"/status => {e}")

    # 5. GET /cleanup => deletedCount
    print("5. GET /cleanup ...")
    try:
        r = _get("/cleanup")
        if not _ok(r) or "deletedCount" not in r.json():
            failures.append(f"/cleanup => {r.status_code} {r.text[:200]}")
        else:
            print(f"   ok deleted={r.json()['deletedCount']}")
    except requests.RequestException as e:
        failures.append(f"/cleanup => {e}")

    if failures:
        print("\nFAILURES:", failures)
        return 1
    print("\nSmoke passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
