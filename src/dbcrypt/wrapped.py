"""Opaque string type for values stored encrypted in the database."""

from typing import Self


class EncryptedString:
    """A string which is encrypted before being written to the database
    and decrypted after being read from it.

    Instances hold the clear text, but are deliberately not ``str``: code has
    to call :func:`unwrap` (or ``str()``) to get at the value, so a column
    typed as ``EncryptedString`` cannot be mistaken for plain text.

    Equality is by value against another ``EncryptedString`` or a ``str``
    (case-sensitive), and the hash matches the underlying string's hash.
    """

    __slots__ = ("_value",)

    _value: str

    def __init__(self, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"EncryptedString requires a str, got {type(value).__name__}")
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("EncryptedString is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("EncryptedString is immutable")

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EncryptedString):
            return self._value == other._value
        if isinstance(other, str):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return "EncryptedString('***')"

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> Self:
        return self

    def __reduce__(self) -> tuple[type[Self], tuple[str]]:
        return (type(self), (self._value,))


def wrap(value: str | None) -> EncryptedString | None:
    """Wrap a clear-text string; ``None`` stays ``None``."""
    if value is None:
        return None
    if isinstance(value, EncryptedString):
        return value
    return EncryptedString(value)


def unwrap(value: EncryptedString | None) -> str | None:
    """Return the clear text held by *value*; ``None`` stays ``None``."""
    if value is None:
        return None
    return value.value
