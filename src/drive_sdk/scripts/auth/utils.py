from __future__ import annotations

import os

from drive_sdk.client import DriveClient


def ensure_authenticated(client: DriveClient) -> None:
    """
    Ensure client has a token.

    Order:
    1) token already present (env DRIVE_TOKEN or loaded from storage by DriveClient.from_env)
    2) sign in using env DRIVE_EMAIL/DRIVE_PASSWORD (and client will persist token to storage)

    No CLI args, no prompts.
    """
    client.on_session_expired = exit_on_expired_session
    if client.token:
        return

    email = os.getenv("DRIVE_EMAIL", "").strip()
    password = os.getenv("DRIVE_PASSWORD", "").strip()

    if not email or not password:
        raise SystemExit(
            "Not authenticated.\n"
            "Set DRIVE_EMAIL and DRIVE_PASSWORD in .env (or set DRIVE_TOKEN).\n"
        )

    client.sign_in(email, password)


def exit_on_expired_session() -> None:
    raise SystemExit("Session expired. Sign in again (DRIVE_EMAIL/DRIVE_PASSWORD or a new DRIVE_TOKEN).")
