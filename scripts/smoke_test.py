"""
起動中のサーバーに対する簡易スモークテスト
  BASE_URL=http://127.0.0.1:5000 SMOKE_EMAIL=... SMOKE_PASSWORD=... python scripts/smoke_test.py
アカウントは許可リスト登録済みであること（scripts/authorize_email.py）
"""
import os
import sys
import time

import requests
from urllib.parse import urlparse

BASE_URL = os.environ.get("BASE_URL", "http://127.0.0.1:5000")
EMAIL = os.environ.get("SMOKE_EMAIL", "admin@example.com")
PASSWORD = os.environ.get("SMOKE_PASSWORD", "admin1234")


def print_result(results, label, ok, detail=None):
    results.append((label, ok, detail))
    msg = ("PASS" if ok else "FAIL") + ": " + label
    if detail:
        msg += f" [{detail}]"
    print(msg, flush=True)


def wait_for_server():
    for _ in range(10):
        try:
            if requests.get(f"{BASE_URL}/health", timeout=5).status_code == 200:
                return True
        except requests.RequestException:
            time.sleep(1)
    return False


def main():
    results = []
    if not wait_for_server():
        print("[ERROR] server not reachable:", BASE_URL)
        return 1

    anon = requests.get(f"{BASE_URL}/dashboard/quotes", allow_redirects=False, timeout=5)
    print_result(results, "anonymous quotes redirects to landing",
                 anon.status_code == 302 and urlparse(anon.headers.get("Location", "")).path == "/",
                 f"status={anon.status_code}")

    s = requests.Session()
    resp = s.post(f"{BASE_URL}/login", data={"email": EMAIL, "password": PASSWORD}, allow_redirects=False, timeout=5)
    print_result(results, "login", resp.status_code == 302, f"status={resp.status_code}")

    resp = s.get(f"{BASE_URL}/dashboard/quotes", allow_redirects=False, timeout=5)
    print_result(results, "quotes list", resp.status_code == 200, f"status={resp.status_code}")

    project = f"smoke-{int(time.time())}"
    resp = s.post(f"{BASE_URL}/dashboard/quotes",
                  data={"customer_name": "Smoke", "project_name": project},
                  allow_redirects=True, timeout=5)
    print_result(results, "create quote", resp.status_code == 200 and project in resp.text,
                 f"status={resp.status_code}")

    resp = s.get(f"{BASE_URL}/api/catalog/products", timeout=5)
    print_result(results, "catalog products", resp.status_code == 200 and "products" in resp.json(),
                 f"status={resp.status_code}")

    fails = [r for r in results if not r[1]]
    if fails:
        print("\nSome tests failed.")
        return 1
    print("\nAll smoke tests passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
