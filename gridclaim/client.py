# gridclaim/client.py
import argparse, threading, time
from typing import List

import requests


def blast(url: str, cells: List[str], n: int = 10, timeout: float = 5.0) -> List[int]:
    """POST the same claim from n threads at once; returns the status codes."""
    t0 = time.time(); codes = []
    lock = threading.Lock()
    def worker(i):
        body = {"owner": f"client{i}", "color": "Red", "cells": cells}
        try:
            r = requests.post(f"{url.rstrip('/')}/claim", json=body, timeout=timeout)
            code = r.status_code
            print(f"[{i}] {code}")
        except requests.RequestException as e:
            print(f"[{i}] ERROR {e}")
            code = -1
        with lock:
            codes.append(code)
    th = [threading.Thread(target=worker, args=(i,), daemon=True) for i in range(n)]
    [t.start() for t in th]; [t.join() for t in th]
    dt = time.time() - t0
    ok = sum(1 for c in codes if c == 200)
    conflict = sum(1 for c in codes if c == 409)
    print(f"Done {n} in {dt:.2f}s (200 OK: {ok}/{n}, 409 conflict: {conflict}/{n})")
    return codes


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--url", default="http://127.0.0.1:5000")
    ap.add_argument("--n", type=int, default=10)
    ap.add_argument("--cells", nargs="+", default=["0 0"])
    a = ap.parse_args()
    print(f"== {a.n} concurrent claims for {a.cells} ==")
    blast(a.url, a.cells, a.n)


if __name__ == "__main__":
    main()
