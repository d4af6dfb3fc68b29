from __future__ import annotations

import argparse

from drive_sdk.client import DriveClient
from drive_sdk.scripts.auth.utils import ensure_authenticated
from drive_sdk.scripts.common import print_json, settings_or_exit, setup_logging


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="drive-search", description="Search folders and files by name")
    ap.add_argument("query")
    args = ap.parse_args(argv)

    query = args.query.strip()
    if not query:
        raise SystemExit("Query must not be empty")

    setup_logging()
    settings_or_exit()
    client = DriveClient.from_env()
    ensure_authenticated(client)

    print_json(client.search.search(query))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
