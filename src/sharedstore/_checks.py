"""Point-of-use argument checks.

Malformed arguments are programming errors: they surface as a TypeError
naming the offending parameter the moment the value would be invoked.
"""

from __future__ import annotations


def require_callable(value: object, name: str) -> None:
    if not callable(value):
        raise TypeError(f"{name} is not callable")
