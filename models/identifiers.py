"""Record identifiers shared with the mobile client.

Identifiers are 24 hexadecimal characters so that ids minted by the previous
document store remain valid.
"""

import re
import secrets

_IDENTIFIER_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


class InvalidIdentifierError(ValueError):
    """Raised when a user or item identifier is malformed."""


def is_valid_identifier(value: object) -> bool:
    return isinstance(value, str) and bool(_IDENTIFIER_PATTERN.match(value))


def require_identifier(value: object, label: str = "identifier") -> str:
    """Return ``value`` unchanged or raise :class:`InvalidIdentifierError`."""

    if not is_valid_identifier(value):
        raise InvalidIdentifierError(f"Invalid {label}: {value!r}")
    return str(value)


def new_identifier() -> str:
    return secrets.token_hex(12)


__all__ = [
    "InvalidIdentifierError",
    "is_valid_identifier",
    "new_identifier",
    "require_identifier",
]
