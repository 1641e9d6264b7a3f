from typing import Annotated

from optbind.option import DoubleOption, FloatOption, IntegerOption, LongOption
from optbind.parameter import Parameter

__all__ = [
    # Option variants
    "Integer",
    "Long",
    "Float",
    "Double",
    # Bounded
    "NonNegativeInt",
    "PositiveInt",
    "Port",
]

###################
# Option variants #
###################
Integer = Annotated[int, Parameter(option_type=IntegerOption)]
"A signed 32-bit integer; values outside that range are rejected."
Long = Annotated[int, Parameter(option_type=LongOption)]
"A signed 64-bit integer; values outside that range are rejected."
Float = Annotated[float, Parameter(option_type=FloatOption)]
"A locale-formatted number, stored with single precision."
Double = Annotated[float, Parameter(option_type=DoubleOption)]
"A locale-formatted number."

###########
# Bounded #
###########
NonNegativeInt = Annotated[int, Parameter(min="0")]
"An int that **must** be ``>=0``."
PositiveInt = Annotated[int, Parameter(min="1")]
"An int that **must** be ``>=1``."
Port = Annotated[int, Parameter(min="0", max="65535")]
"A network port number."
