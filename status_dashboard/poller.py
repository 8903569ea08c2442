import time

import requests
import urllib3

from .logs import log_event

DEFAULT_URL = "http://127.0.0.1:5001/api/status"


def fetch_status(url=DEFAULT_URL, verify=True, timeout=10):
    if not verify:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    try:
        r = requests.get(url, verify=verify, timeout=timeout)
    except requests.RequestException as e:
        log_event("error", f"Status fetch failed: {e}")
        return None

    if r.status_code != 200:
        log_event("error", f"Status fetch failed: HTTP {r.status_code}")
        return None
    try:
        data = r.json()
    except ValueError as e:
        log_event("error", f"Status response is not JSON: {e}")
        return None
    if not isinstance(data, dict):
        log_event("error", "Status response is not a JSON object")
        return None
    return data


def describe(snapshot):
    prs = snapshot.get("prs") or []
    tasks = snapshot.get("tasks") or []
    open_prs = sum(1 for pr in prs if pr.get("status") == "open")
    done = sum(1 for task in tasks if task.get("status") == "done")
    return (f"updated {snapshot.get('lastUpdated', '?')} | "
            f"PRs {open_prs}/{len(prs)} open | tasks {done}/{len(tasks)} done")


def poll_once(url=DEFAULT_URL, verify=True, buffer=None):
    snapshot = fetch_status(url, verify=verify)
    if snapshot is not None:
        log_event("ok", describe(snapshot), buffer=buffer)
    return snapshot


def poll_forever(url=DEFAULT_URL, interval=15, verify=True, sleep=time.sleep):
    while True:
        log_event("monitor", f"Polling {url}")
        poll_once(url, verify=verify)
        sleep(interval)
