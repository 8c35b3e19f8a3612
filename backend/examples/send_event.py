"""Example client that logs dataset events and prints the popularity ranking."""
from __future__ import annotations

import argparse
import os

import requests


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Log a dataset view and download")
    parser.add_argument("dataset_id", help="Registry identifier of the dataset")
    parser.add_argument(
        "--api-url",
        default=os.environ.get("DATASETS_API_URL", "http://127.0.0.1:4000"),
        help="Dataset API base URL (default: %(default)s or DATASETS_API_URL)",
    )
    parser.add_argument(
        "--secret",
        default=os.environ.get("SECRET_KEY"),
        help="Shared secret sent as the bearer credential (SECRET_KEY)",
    )
    args = parser.parse_args()
    if not args.secret:
        parser.error("A secret must be supplied via --secret or SECRET_KEY")
    return args


def main() -> None:
    args = parse_args()
    headers = {"Authorization": f"Bearer {args.secret}"}
    payload = {"datasetId": args.dataset_id}

    for path in ("/log-dataset-view", "/log-dataset-download"):
        response = requests.post(f"{args.api_url}{path}", headers=headers, json=payload, timeout=10)
        response.raise_for_status()
        print("Logged:", response.json()["log"])

    ranking = requests.get(f"{args.api_url}/api/datasets", timeout=60)
    ranking.raise_for_status()
    for position, dataset in enumerate(ranking.json(), start=1):
        print(f"{position}. {dataset['title']} ({dataset['views']} views, {dataset['downloads']} downloads)")


if __name__ == "__main__":
    main()
