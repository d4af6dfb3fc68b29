from __future__ import annotations

import argparse

from drive_sdk.client import DriveClient
from drive_sdk.models.batch import BatchOperation
from drive_sdk.scripts.auth.utils import ensure_authenticated
from drive_sdk.scripts.common import parse_keys, print_notices, settings_or_exit, setup_logging


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="drive-batch", description="Delete, move or restore many items in one request")
    ap.add_argument("operation", choices=[op.value for op in BatchOperation])
    ap.add_argument("items", nargs="+", help="folder:<id> or file:<id> (repeat)")
    ap.add_argument("--to", default=None, help="Target folder id for move (default: My Drive)")
    args = ap.parse_args(argv)

    setup_logging()
    settings_or_exit()
    keys = parse_keys(args.items)

    client = DriveClient.from_env()
    ensure_authenticated(client)

    operation = BatchOperation(args.operation)
    # restores act on the trash listing, the rest on a browsing view
    target = client.trash_view() if operation is BatchOperation.RESTORE else client.browser()
    for k in keys:
        target.selection.toggle(k.id, k.entity_type)

    if operation is BatchOperation.RESTORE:
        outcome = target.restore_selected()
    elif operation is BatchOperation.MOVE:
        outcome = target.move_selected(args.to)
    else:
        outcome = target.delete_selected()

    print_notices(target.notices)
    if outcome is None or outcome.failed:
        return 1
    for k in sorted(outcome.failed_keys):
        print(f"  not {operation.past_tense}: {k}")
    return 0 if not outcome.failed_keys else 2


if __name__ == "__main__":
    raise SystemExit(main())
