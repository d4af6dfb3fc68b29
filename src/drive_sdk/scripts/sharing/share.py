from __future__ import annotations

import argparse

from drive_sdk.client import DriveClient
from drive_sdk.models.sharing import Permission
from drive_sdk.scripts.auth.utils import ensure_authenticated
from drive_sdk.scripts.common import exit_code, parse_keys, print_json, print_notices, settings_or_exit, setup_logging


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="drive-share", description="Share items and list shares")
    sub = ap.add_subparsers(dest="cmd", required=True)
    p_add = sub.add_parser("add")
    p_add.add_argument("item", help="folder:<id> or file:<id>")
    p_add.add_argument("email")
    p_add.add_argument("--permission", choices=[p.value for p in Permission], default=Permission.VIEW.value)
    sub.add_parser("inbox", help="Items shared with me")
    sub.add_parser("sent", help="Items I shared")
    p_rm = sub.add_parser("remove")
    p_rm.add_argument("share_id")
    args = ap.parse_args(argv)

    setup_logging()
    settings_or_exit()
    client = DriveClient.from_env()
    ensure_authenticated(client)

    if args.cmd == "add":
        (key,) = parse_keys([args.item])
        view = client.browser()
        share = view.share(key, args.email, Permission(args.permission))
        if share is not None:
            print_json(share)
        print_notices(view.notices)
        return exit_code(view.notices)

    if args.cmd == "inbox":
        print_json([s.model_dump(mode="json") for s in client.sharing.shared_with_me()])
    elif args.cmd == "sent":
        print_json([s.model_dump(mode="json") for s in client.sharing.sent()])
    else:
        client.sharing.delete(args.share_id)
        print(f"removed share {args.share_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
