from __future__ import annotations

import argparse
from pathlib import Path

from drive_sdk.browse.uploads import FileInput
from drive_sdk.client import DriveClient
from drive_sdk.scripts.auth.utils import ensure_authenticated
from drive_sdk.scripts.common import exit_code, print_notices, settings_or_exit, setup_logging


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="drive-upload", description="Upload local files, or a whole directory")
    ap.add_argument("paths", nargs="+", help="Local files, or one directory with --dir")
    ap.add_argument("--folder", default=None, help="Target folder id (default: My Drive)")
    ap.add_argument("--dir", action="store_true", help="Upload one directory, keeping its structure")
    args = ap.parse_args(argv)

    setup_logging()
    settings_or_exit()

    if args.dir:
        if len(args.paths) != 1:
            raise SystemExit("--dir takes exactly one directory")
        root = Path(args.paths[0]).expanduser()
        if not root.is_dir():
            raise SystemExit(f"Directory not found: {root}")
        file_input = FileInput.from_directory(root)
    else:
        for p in args.paths:
            fp = Path(p).expanduser()
            if not fp.is_file():
                raise SystemExit(f"File not found: {fp}")
        file_input = FileInput.from_paths(args.paths)

    if file_input.empty:
        raise SystemExit("Nothing to upload")

    client = DriveClient.from_env()
    ensure_authenticated(client)

    view = client.browser(args.folder)
    report = view.upload_folder(file_input) if args.dir else view.upload_files(file_input)

    print(f"attempted={report.attempted} failed={len(report.failures)}")
    print_notices(view.notices)
    return exit_code(view.notices)


if __name__ == "__main__":
    raise SystemExit(main())
