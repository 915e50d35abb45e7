"""Case-insensitive search predicates for instances and accounts."""

from __future__ import annotations

from ..data.types import Account, Instance


def instance_matches(instance: Instance, query: str) -> bool:
    """Return whether ``query`` (already lower-cased) hits any searchable field."""
    if not query:
        return True
    fields = (instance.name, instance.minecraft_version, instance.mod_loader, instance.group)
    return any(field and query in field.lower() for field in fields)


def account_matches(account: Account, query: str) -> bool:
    if not query:
        return True
    return query in account.username.lower()
