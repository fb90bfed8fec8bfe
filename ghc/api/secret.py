"""Secret-bearing credential type.

Wraps API tokens so they never show up in logs, tracebacks, or debug output
by accident. The raw value is only reachable through expose_secret().
"""

import hashlib
import hmac

REDACTED = "[REDACTED]"


class SecretToken:
    """An API token that hides its value from repr(), str() and formatting.

    Example:
        >>> token = SecretToken("ghp_abc123")
        >>> print(token)
        [REDACTED]
        >>> token.expose_secret()
        'ghp_abc123'
    """

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        if isinstance(value, SecretToken):
            value = value.expose_secret()
        self._value = value

    def expose_secret(self) -> str:
        """Return the raw token. Callers must not log or display the result."""
        return self._value

    def __repr__(self) -> str:
        return f"SecretToken({REDACTED!r})"

    def __str__(self) -> str:
        return REDACTED

    def __format__(self, format_spec: str) -> str:
        return format(REDACTED, format_spec)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretToken):
            return NotImplemented
        return hmac.compare_digest(self._value.encode(), other._value.encode())

    def __hash__(self) -> int:
        return hash(hashlib.sha256(self._value.encode()).digest())

    def __bool__(self) -> bool:
        return bool(self._value)
