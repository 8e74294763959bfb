"""Identifier helpers shared by the services."""

from typing import Union


def normalize_id(value: Union[int, str]) -> int:
    """Return the canonical integer form of an entity id.

    Accepts ints and numeric strings (surrounding whitespace allowed).
    Raises ``ValueError`` for anything that is not a whole number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid id: {value!r}")
    if isinstance(value, int):
        return value
    return int(str(value).strip())
