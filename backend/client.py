# backend/client.py
import json
import requests

from docutasks.services.export import read_spreadsheet

API = "http://localhost:8000/api/v1"  # adjust if running on docker-compose

def read_events(r):
    for line in r.iter_lines(decode_unicode=True):
        if line and line.startswith("data: "):
            yield json.loads(line[len("data: "):])

def test_health():
    r = requests.get(f"{API}/health")
    print("Health:", r.status_code, r.json())

def test_analyze_text():
    text = "A marketplace where sellers list handmade goods and buyers pay by card."
    with requests.post(f"{API}/documents/analyze", data={"text": text}, stream=True, timeout=300) as r:
        print("Analyze:", r.status_code)
        for event in read_events(r):
            if event["type"] == "progress":
                print(f"  {event['progress']:>3}% {event['message']}")
            elif event["type"] == "complete":
                print("  ", event["result"]["summary"])
                return event["result"]["tasks"]
            else:
                print("  error:", event["category"], event["error"])
    return []

def test_export(tasks):
    r = requests.post(f"{API}/documents/export", json={"tasks": tasks, "sheet_name": "Marketplace"})
    print("Export:", r.status_code, r.headers.get("content-type"), len(r.content), "bytes")
    if r.ok:
        for row in read_spreadsheet(r.content)[:5]:
            print("  ", row["Task ID"], row["Title"])

if __name__ == "__main__":
    print("--- Testing FastAPI backend ---")
    test_health()
    tasks = test_analyze_text()
    if tasks:
        test_export(tasks)
