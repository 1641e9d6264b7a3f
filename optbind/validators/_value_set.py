from collections.abc import Iterable
from typing import Any

from attrs import field

from optbind.utils import frozen


def _ordered(values: Iterable[Any]) -> tuple[Any, ...]:
    values = tuple(dict.fromkeys(values))
    try:
        return tuple(sorted(values))
    except TypeError:
        # Mixed, non-orderable values keep their declaration order.
        return values


@frozen
class ValueSet:
    """Limit a value to a fixed set of admissible values.

    Values are compared after conversion, so ``ValueSet({1, 2})`` on an integer
    option accepts ``"--level=2"`` but rejects ``"--level=3"``.
    """

    values: tuple[Any, ...] = field(converter=_ordered)
    """Admissible values, in sorted order where possible."""

    def validate(self, value: Any) -> bool:
        if value is None:
            return False
        try:
            return value in self.values
        except TypeError:
            return False

    def __str__(self):
        return "allowed values [" + ", ".join(str(x) for x in self.values) + "]"
