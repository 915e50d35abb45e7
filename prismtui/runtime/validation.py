"""Input validation for the server add/edit dialogs."""

from __future__ import annotations

MAX_PORT = 65535


def validate_server_name(name: str) -> str | None:
    if not name.strip():
        return "Server name cannot be empty"
    return None


def validate_server_address(address: str) -> str | None:
    """Return an error message for a bad ``host[:port]`` address, else ``None``.

    The port is whatever follows the last colon and must be a decimal
    number no larger than 65535.
    """
    if not address:
        return "Server address cannot be empty"
    if any(ch.isspace() for ch in address):
        return "Server address cannot contain spaces"
    host = address
    if ":" in address:
        host, port = address.rsplit(":", 1)
        if not (port.isascii() and port.isdigit()) or int(port) > MAX_PORT:
            return "Invalid port number"
    if not host:
        return "Server hostname cannot be empty"
    return None
