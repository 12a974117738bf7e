#!/usr/bin/env python3
"""Diagnostic script to check a deployed Wherebuy API.

Usage: python check_deployment.py [BASE_URL]
The URL defaults to WHEREBUY_DEPLOYMENT_URL, then http://localhost:8000.
"""

import json
import os
import sys
from urllib.parse import urljoin

import requests

ENDPOINTS = [
    ("/", "Root"),
    ("/api/health", "Health"),
    ("/api/health/appwrite", "Appwrite Health"),
    ("/docs", "API Documentation"),
]


def check_endpoint(base_url: str, path: str, description: str):
    url = urljoin(base_url, path)
    print(f"\n{'=' * 60}")
    print(f"Checking: {description}")
    print(f"URL: {url}")
    print(f"{'=' * 60}")

    try:
        response = requests.get(url, timeout=10)
    except requests.exceptions.Timeout:
        print("❌ TIMEOUT: Request took longer than 10 seconds")
        return False, None
    except requests.exceptions.ConnectionError as e:
        print(f"❌ CONNECTION ERROR: {e}")
        return False, None

    print(f"Status Code: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text[:500])
    return response.ok, response.status_code


def main(argv: list[str]) -> int:
    base_url = argv[1] if len(argv) > 1 else os.environ.get("WHEREBUY_DEPLOYMENT_URL", "http://localhost:8000")
    print("🔍 Wherebuy Deployment Diagnostic")
    print(f"Target URL: {base_url}")

    results = [(path, *check_endpoint(base_url, path, description)) for path, description in ENDPOINTS]

    print(f"\n{'=' * 60}")
    print("SUMMARY")
    print(f"{'=' * 60}")
    for path, ok, status in results:
        print(f"{path:<24} {'✅' if ok else '❌'} - Status: {status}")

    if not any(ok for _, ok, _ in results):
        print("\n❌ ALL CHECKS FAILED - backend is not accessible")
        print("Check that the service is running and PORT is honored (see start_server.py)")
        return 1
    if not all(ok for _, ok, _ in results):
        print("\n⚠️  Some checks failed; /api/health/appwrite fails until wherebuy-init has been run")
        return 1
    print("\n✅ All checks passed")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
