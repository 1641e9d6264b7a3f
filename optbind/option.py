import math
import re
import struct
from collections.abc import Callable, Mapping
from datetime import date, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

import attrs
from attrs import define, field

from optbind._locale import resolve_locale
from optbind.exceptions import IllegalOptionValueError, SetupError
from optbind.utils import to_list_converter

if TYPE_CHECKING:
    from babel import Locale

    from optbind.protocols import Validator

__all__ = [
    "BooleanOption",
    "DateOption",
    "DoubleOption",
    "FloatOption",
    "HelpOption",
    "IntegerOption",
    "LongOption",
    "OPTION_TYPES",
    "Option",
    "StringOption",
    "option_sort_key",
    "option_type_for",
]

T = TypeVar("T")

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _check_long(instance, attribute, value):
    if not isinstance(value, str) or not value:
        raise SetupError("An option's long form must be a non-empty string.")
    if value.startswith("-") or "=" in value or any(c.isspace() for c in value):
        raise SetupError(f'Invalid long form "{value}"; use the bare name, e.g. "verbose" for "--verbose".')


def _check_short(instance, attribute, value):
    if value is None:
        return
    if not isinstance(value, str) or len(value) != 1 or value == "-" or value.isspace():
        raise SetupError(f'Invalid short form "{value}"; must be exactly one character, e.g. "v" for "-v".')


@define(eq=False)
class Option(Generic[T]):
    """A single command-line option and the conversion of its value.

    Subclasses implement :meth:`parse` for one target type and set :attr:`value_needed`.
    Options compare by identity; parsed values are stored by :attr:`long`.

    Example usage:

    .. code-block:: python

        from optbind import IntegerOption, validators

        size = IntegerOption("size", "size of something", short="s")
        size.add_validator(validators.Interval(0, 100))
        str(size)  # ' -s,--size: size of something; interval [0, 100]'
    """

    long: str = field(validator=_check_long)
    """Long form without leading hyphens; ``"verbose"`` is matched as ``--verbose``."""

    description: str = field(default="", converter=attrs.converters.default_if_none(""))
    """Human readable description for the usage text."""

    short: str | None = field(default=None, kw_only=True, validator=_check_short)
    """Optional single character; ``"v"`` is matched as ``-v``."""

    validators: list["Validator"] = field(factory=list, kw_only=True, converter=to_list_converter)
    """Applied in order to every converted value."""

    value_needed: ClassVar[bool] = True
    """Whether the option consumes a value (``--size 5``) or is a flag (``--verbose``)."""

    @property
    def names(self) -> tuple[str, ...]:
        """Command-line spellings of this option, short form first."""
        if self.short is None:
            return (f"--{self.long}",)
        return (f"-{self.short}", f"--{self.long}")

    @property
    def display_name(self) -> str:
        return "/".join(self.names)

    def add_validator(self, validator: "Validator") -> "Option[T]":
        """Append a validator; returns the option for chaining."""
        self.validators.append(validator)
        return self

    def parse(self, raw: str, locale: "Locale") -> T:
        """Convert a raw command-line string into the option's value.

        May raise any exception; :meth:`parse_value` converts it into an
        :exc:`.IllegalOptionValueError`.
        """
        raise NotImplementedError

    def parse_value(self, raw: str | None, locale: "Locale | str | None" = None) -> T:
        """Run :meth:`parse`, reporting any failure as :exc:`.IllegalOptionValueError`."""
        locale = resolve_locale(locale)
        try:
            return self.parse(raw, locale)  # pyright: ignore[reportArgumentType]
        except IllegalOptionValueError:
            raise
        except Exception as e:
            raise IllegalOptionValueError(option=self, value=raw or "") from e

    def get_value(self, raw: str | None, locale: "Locale | str | None" = None) -> T:
        """Convert and validate a value supplied on the command-line.

        Parameters
        ----------
        raw: str | None
            The command-line string, or :obj:`None` if no value was supplied.
        locale: babel.Locale | str | None
            Locale for locale-sensitive conversions.

        Raises
        ------
        IllegalOptionValueError
            The value is missing, could not be converted, or was rejected by a validator.
        """
        if self.value_needed and raw is None:
            raise IllegalOptionValueError(option=self, missing=True)
        value = self.parse_value(raw, locale)
        for validator in self.validators:
            if not validator.validate(value):
                raise IllegalOptionValueError(option=self, value=raw or "", validator=validator)
        return value

    def __str__(self):
        out = f" -{self.short}," if self.short is not None else ""
        out += f"--{self.long}"
        if self.description:
            out += f": {self.description}"
        for validator in self.validators:
            out += f"; {validator}"
        return out


@define(eq=False)
class BooleanOption(Option[bool]):
    """Flag that is :obj:`True` whenever it is present."""

    value_needed: ClassVar[bool] = False

    def parse(self, raw, locale) -> bool:
        return True


@define(eq=False)
class IntegerOption(Option[int]):
    """Signed 32-bit integer in plain decimal notation; independent of locale."""

    bits: ClassVar[int] = 32

    def parse(self, raw, locale) -> int:
        if not _INTEGER_RE.fullmatch(raw):
            raise ValueError(f'"{raw}" is not an integer.')
        value = int(raw)
        limit = 1 << (self.bits - 1)
        if not -limit <= value < limit:
            raise OverflowError(f"Out of range for a {self.bits}-bit integer.")
        return value


@define(eq=False)
class LongOption(IntegerOption):
    """Signed 64-bit integer in plain decimal notation; independent of locale."""

    bits: ClassVar[int] = 64


@define(eq=False)
class DoubleOption(Option[float]):
    """Floating point number in the locale's notation (``0.2`` for ``en_US``, ``0,2`` for ``de_DE``)."""

    def parse(self, raw, locale) -> float:
        from babel.numbers import parse_decimal

        return float(parse_decimal(raw, locale=locale, strict=True))


@define(eq=False)
class FloatOption(DoubleOption):
    """Like :class:`DoubleOption`, narrowed to single precision."""

    def parse(self, raw, locale) -> float:
        value = super().parse(raw, locale)
        narrowed = struct.unpack("f", struct.pack("f", value))[0]
        if math.isinf(narrowed) and not math.isinf(value):
            raise OverflowError("Out of range for a single precision float.")
        return narrowed


@define(eq=False)
class StringOption(Option[str]):
    """Raw command-line string, unchanged (whitespace included)."""

    def parse(self, raw, locale) -> str:
        return raw


@define(eq=False)
class DateOption(Option[date]):
    """Calendar date.

    Parsed with :attr:`date_format` (a :meth:`~datetime.datetime.strptime` format)
    when set, otherwise with the locale's short date format (``1/31/2024`` for ``en_US``,
    ``31.01.2024`` for ``de_DE``).
    """

    date_format: str | None = field(default=None, kw_only=True)

    def parse(self, raw, locale) -> date:
        if self.date_format is not None:
            return datetime.strptime(raw, self.date_format).date()

        from babel.dates import parse_date

        return parse_date(raw, locale=locale, format="short")


@define(eq=False)
class HelpOption(Option[None]):
    """Flag that invokes :attr:`callback` (typically printing usage) every time it is parsed."""

    long: str = field(default="help", validator=_check_long)
    description: str = field(default="display help", converter=attrs.converters.default_if_none(""))
    short: str | None = field(default="h", kw_only=True, validator=_check_short)
    callback: Callable[[], Any] | None = field(default=None, kw_only=True)

    value_needed: ClassVar[bool] = False

    def parse(self, raw, locale) -> None:
        if self.callback is not None:
            self.callback()
        return None


OPTION_TYPES: Mapping[type, type[Option]] = MappingProxyType(
    {
        bool: BooleanOption,
        int: IntegerOption,
        float: DoubleOption,
        str: StringOption,
        date: DateOption,
    }
)
"""Default mapping from a field's value type to the :class:`Option` that parses it."""


def option_type_for(hint: Any, option_types: Mapping[type, type[Option]] | None = None) -> type[Option]:
    """Look up the :class:`Option` subclass for a value type.

    Parameters
    ----------
    hint: type
        Value type of a field, e.g. :class:`int`.
    option_types: Mapping[type, type[Option]] | None
        Additional entries; these take priority over :data:`OPTION_TYPES`.

    Raises
    ------
    SetupError
        No option type is registered for ``hint``.
    """
    if option_types and hint in option_types:
        return option_types[hint]
    try:
        return OPTION_TYPES[hint]
    except (KeyError, TypeError):
        pass
    name = getattr(hint, "__name__", repr(hint))
    raise SetupError(f'No option type registered for values of type "{name}".')


def option_sort_key(option: Option) -> tuple[bool, str]:
    """Usage-text ordering: options with a short form first, then by long form."""
    return (option.short is None, option.long)
