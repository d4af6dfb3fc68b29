from __future__ import annotations

import argparse

from drive_sdk.client import DriveClient
from drive_sdk.scripts.auth.utils import ensure_authenticated
from drive_sdk.scripts.common import exit_code, parse_keys, print_notices, settings_or_exit, setup_logging


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="drive-trash", description="List, restore or permanently delete trashed items")
    sub = ap.add_subparsers(dest="cmd", required=True)
    sub.add_parser("list")
    p_restore = sub.add_parser("restore")
    p_restore.add_argument("items", nargs="+", help="folder:<id> or file:<id>")
    p_purge = sub.add_parser("purge")
    p_purge.add_argument("items", nargs="+", help="folder:<id> or file:<id>")
    args = ap.parse_args(argv)

    setup_logging()
    settings_or_exit()

    client = DriveClient.from_env()
    ensure_authenticated(client)

    trash = client.trash_view()
    if args.cmd == "list":
        trash.load()
        if trash.empty:
            print("Trash is empty")
        for f in trash.contents.folders:
            print(f"  [dir]  {f.name}  (folder:{f.id})")
        for f in trash.contents.files:
            print(f"  {f.size:>10}  {f.name}  (file:{f.id})")
    else:
        action = trash.restore if args.cmd == "restore" else trash.purge
        for key in parse_keys(args.items):
            action(key)

    print_notices(trash.notices)
    return exit_code(trash.notices)


if __name__ == "__main__":
    raise SystemExit(main())
