"""String enum whose members carry a short description."""

from enum import StrEnum
from typing import Self


class StrEnumWithDoc(StrEnum):
    """String enum where each member may be declared as ``NAME = value, doc``.

    The description is stored on the member's ``__doc__`` so it can be shown
    in CLI help and rendered tables.
    """

    def __new__(cls, value: str, doc: str = "") -> Self:
        """Create a new enum member with a description."""
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.__doc__ = doc
        return obj

    @property
    def description(self) -> str:
        """Return the member description (empty when none was given)."""
        return self.__doc__ or ""
