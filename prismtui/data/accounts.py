"""Account list from ``accounts.json``."""

from __future__ import annotations

import json
from pathlib import Path

from ..errors import DataLoadError
from .types import Account


def load_accounts(accounts_path: Path) -> list[Account]:
    """Return accounts that carry a game profile, in file order.

    A missing file yields an empty list; a malformed one raises
    ``DataLoadError``.
    """
    if not accounts_path.exists():
        return []
    try:
        data = json.loads(accounts_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise DataLoadError(f"Failed to read {accounts_path.name}: {exc}") from exc

    entries = data.get("accounts") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise DataLoadError(f"{accounts_path.name} has no 'accounts' list")

    accounts: list[Account] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        profile = entry.get("profile")
        if not isinstance(profile, dict):
            continue
        profile_id = profile.get("id")
        username = profile.get("name")
        if not isinstance(profile_id, str) or not isinstance(username, str):
            continue
        accounts.append(
            Account(
                profile_id=profile_id,
                username=username,
                is_active=entry.get("active") is True,
            )
        )
    return accounts


def active_account_name(accounts: list[Account]) -> str | None:
    for account in accounts:
        if account.is_active:
            return account.username
    return None
