__all__ = [
    "Interval",
    "ValueSet",
]

from optbind.validators._interval import Interval
from optbind.validators._value_set import ValueSet
