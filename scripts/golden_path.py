#!/usr/bin/env python3
"""Golden path demo for IdGate (acquire an id, renew it once)."""

from __future__ import annotations

import json
import os
import sys
from typing import Any
from urllib.error import HTTPError
from urllib.request import Request, urlopen


def _env(name: str, default: str | None = None) -> str | None:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value


class HttpClient:
    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def request_json(self, method: str, path: str, timeout: float = 10.0) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        req = Request(url, method=method)

        try:
            with urlopen(req, timeout=timeout) as response:
                raw = response.read()
                error_code = response.headers.get("X-IdGate-Error")
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise RuntimeError(f"{method} {url} failed: {exc.code} {exc.reason}: {detail}") from None

        if error_code:
            raise RuntimeError(f"{method} {url} failed: {error_code}")
        if not raw:
            return {}
        return json.loads(raw.decode("utf-8"))


def main() -> int:
    idgate_url = _env("IDGATE_URL", "http://localhost:8080")
    client = HttpClient(idgate_url)

    print("Checking health...")
    health = client.request_json("GET", "/v1/health")
    if health.get("status") != "healthy":
        raise RuntimeError(f"Unexpected health response: {health}")

    print("Acquiring worker id...")
    lease = client.request_json("POST", "/v1/leases/acquire")
    print(f"  id={lease['id']} granted at {lease['ts']}, renew by {lease['re_ts']}")

    print("Renewing...")
    renewed = client.request_json("POST", f"/v1/leases/{lease['id']}/renew")
    if renewed["id"] != lease["id"]:
        print(f"  lease lapsed, now holding id={renewed['id']}")
    print(f"  id={renewed['id']} renew by {renewed['re_ts']}")

    stats = client.request_json("GET", "/v1/stats")
    print(f"Table: {stats['leased']}/{stats['capacity']} leased")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception as exc:
        print(f"Golden path failed: {exc}", file=sys.stderr)
        sys.exit(1)
