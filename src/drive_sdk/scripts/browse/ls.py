from __future__ import annotations

import argparse
from dataclasses import asdict

from drive_sdk.client import DriveClient
from drive_sdk.scripts.auth.utils import ensure_authenticated
from drive_sdk.scripts.common import exit_code, print_json, print_notices, settings_or_exit, setup_logging


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="drive-ls", description="List a folder with its breadcrumb trail")
    ap.add_argument("folder_id", nargs="?", default=None, help="Folder id (omit for My Drive)")
    ap.add_argument("--json", action="store_true", help="Print the raw listing as JSON")
    args = ap.parse_args(argv)

    setup_logging()
    settings_or_exit()
    client = DriveClient.from_env()
    ensure_authenticated(client)

    view = client.browser(args.folder_id)
    view.load()

    if args.json:
        print_json({
            "breadcrumbs": [asdict(c) for c in view.breadcrumbs],
            "contents": view.contents.model_dump(mode="json") if view.contents else None,
        })
    else:
        trail = " / ".join(["My Drive"] + [c.name for c in view.breadcrumbs])
        print(trail)
        for f in view.folders:
            print(f"  [dir]  {f.name}  (folder:{f.id})")
        for f in view.files:
            print(f"  {f.size:>10}  {f.name}  (file:{f.id})")
        print_notices(view.notices)

    return exit_code(view.notices)


if __name__ == "__main__":
    raise SystemExit(main())
