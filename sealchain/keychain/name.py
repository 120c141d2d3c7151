"""
Validated keypair names.
"""

import string

from ..errors import BadCharError, EmptyNameError

VALID_CHARS = frozenset(string.ascii_letters + string.digits + "-_.")


class KeypairName:
    """
    Pre-verified name for keypairs.

    Only ASCII letters, digits, ``-``, ``_`` and ``.`` are allowed, so the
    derived filenames are always safe to join onto the keychain directory.
    """

    __slots__ = ("_value",)

    def __init__(self, raw: str):
        """
        Validate and wrap a raw name.

        Raises:
            EmptyNameError: If the name is empty
            BadCharError: On the first character outside the allowed set
        """
        if not raw:
            raise EmptyNameError()
        for c in raw:
            if c not in VALID_CHARS:
                raise BadCharError(c)
        self._value = raw

    @classmethod
    def validate(cls, raw: str) -> "KeypairName":
        return cls(raw)

    def as_str(self) -> str:
        return self._value

    def public_filename(self) -> str:
        return f"{self._value}.pub"

    def secret_filename(self) -> str:
        return f"{self._value}.sec"

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"KeypairName({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeypairName):
            return False
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)
