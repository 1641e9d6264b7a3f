from typing import Any

from attrs import field

from optbind.exceptions import SetupError
from optbind.utils import frozen


def _check_bounds(instance, attribute, value):
    if instance.min is None or value is None:
        return
    try:
        inverted = instance.min > value
    except TypeError as e:
        raise SetupError(f"Interval bounds {instance.min!r} and {value!r} are not comparable.") from e
    if inverted:
        raise SetupError(f"Interval minimum {instance.min!r} is greater than maximum {value!r}.")


@frozen
class Interval:
    """Limit a value to a closed range; either end may be left open.

    Example Usage:

    .. code-block:: python

        from optbind import IntegerOption, Parser, validators

        parser = Parser()
        size = parser.add_option(IntegerOption("size", "size of something", short="s"))
        size.add_validator(validators.Interval(0, 100))

    .. code-block:: console

        $ my-script -s 1000
        Illegal value "1000" for option "-s/--size". Expected interval [0, 100].
    """

    min: Any = None
    """Smallest accepted value (inclusive). :obj:`None` leaves the range open below."""

    max: Any = field(default=None, validator=_check_bounds)
    """Largest accepted value (inclusive). :obj:`None` leaves the range open above."""

    def validate(self, value: Any) -> bool:
        if value is None:
            return False
        try:
            return (self.min is None or value >= self.min) and (self.max is None or value <= self.max)
        except TypeError:
            return False

    def __str__(self):
        lower = "]..." if self.min is None else f"[{self.min}"
        upper = "...[" if self.max is None else f"{self.max}]"
        return f"interval {lower}, {upper}"
