import logging
import sys
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar, get_origin, get_type_hints

from optbind._locale import DEFAULT_LOCALE
from optbind.application import get_application
from optbind.exceptions import IllegalOptionValueError, OptbindError, SetupError
from optbind.option import HelpOption, Option, option_type_for
from optbind.parameter import Parameter, get_parameters
from optbind.parser import Parser
from optbind.utils import DEFAULT_APPLICATION_NAME, application_name_from_package, normalize_tokens
from optbind.validators import Interval, ValueSet

if TYPE_CHECKING:
    from babel import Locale
    from rich.console import Console

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _annotated_fields(cls: type) -> Iterator[tuple[str, Any, list[Parameter]]]:
    """Yield ``(name, value_type, parameters)`` for every field declared with a :class:`.Parameter`.

    Fields are yielded in declaration order, base classes first.
    """
    try:
        hints = get_type_hints(cls, include_extras=True)
    except Exception as e:
        raise SetupError(f'Could not resolve the annotations of "{cls.__qualname__}".') from e

    for name, hint in hints.items():
        if get_origin(hint) is ClassVar:
            continue
        value_type, parameters = get_parameters(hint)
        if parameters:
            yield name, value_type, parameters


class Reader(Generic[T]):
    """Populate the fields of an object from the command-line.

    Every field annotated with a :class:`.Parameter` becomes an option; its
    type selects the :class:`.Option` subclass that converts the value.

    Example usage:

    .. code-block:: python

        from typing import Annotated

        from optbind import Application, Parameter, Reader


        @Application(name="my-script", help=True, usage_on_error=True)
        class Config:
            size: Annotated[int, Parameter(short="s", description="a fancy size value", min="0", max="100")] = 10
            verbose: Annotated[bool, Parameter(short="v")] = False


        reader = Reader(Config)
        config = reader.read()
        if reader.help_requested():
            raise SystemExit(0)

    Parameters
    ----------
    target: T | type[T]
        Object to populate, or a class to instantiate without arguments.
    locale: babel.Locale | str
        Locale for converting values, bounds and choices.
    console: rich.console.Console | None
        Output sink for usage text. Defaults to a console writing to stderr.
    option_types: Mapping[type, type[Option]] | None
        Extra value-type to :class:`.Option` mappings, taking priority over :data:`.OPTION_TYPES`.
    strict: bool
        Raise if a parsed value can't be assigned to its field.
        By default such fields silently keep their previous value.

    Raises
    ------
    SetupError
        The target can't be constructed, declares no options, or a declaration is invalid.
    """

    def __init__(
        self,
        target: T | type[T],
        *,
        locale: "Locale | str" = DEFAULT_LOCALE,
        console: Optional["Console"] = None,
        option_types: Mapping[type, type[Option]] | None = None,
        strict: bool = False,
    ):
        if isinstance(target, type):
            try:
                target = target()
            except Exception as e:
                raise SetupError(f'The class "{target.__qualname__}" can not be constructed without arguments.') from e

        self.target: T = target  # pyright: ignore[reportAttributeAccessIssue]
        self.strict = strict
        self.parser = Parser(locale=locale, console=console)

        fields = list(_annotated_fields(type(target)))
        if not fields:
            raise SetupError(f'The class "{type(target).__qualname__}" does not declare any Parameter-annotated fields.')

        self._fields: dict[str, Option] = {}
        for name, value_type, parameters in fields:
            parameter = Parameter.combine(*parameters)
            option = self._create_option(name, value_type, parameter, option_types)
            self._add_validators(name, option, parameter)
            self.parser.add_option(option)
            self._fields[name] = option

        application = get_application(target)
        self.help_option: HelpOption | None = self.parser.add_help_option() if application.help else None
        self.usage_on_error = application.usage_on_error

        name = application.name or DEFAULT_APPLICATION_NAME
        if application.name_from_package:
            name = application_name_from_package(sys.argv[0]) or name
        self.parser.application_name = name

    @classmethod
    def of(cls, target: T | type[T], **kwargs) -> "Reader[T]":
        """Alternative spelling of ``Reader(target, **kwargs)``."""
        return cls(target, **kwargs)

    def _create_option(
        self,
        name: str,
        value_type: Any,
        parameter: Parameter,
        option_types: Mapping[type, type[Option]] | None,
    ) -> Option:
        option_cls = parameter.option_type or option_type_for(value_type, option_types)
        try:
            return option_cls(parameter.long or name, parameter.description, short=parameter.short)
        except SetupError:
            raise
        except Exception as e:
            raise SetupError(
                f'Could not create "{option_cls.__name__}" for field "{name}"; '
                "options must accept (long, description, *, short)."
            ) from e

    def _add_validators(self, name: str, option: Option, parameter: Parameter) -> None:
        locale = self.parser.locale
        if parameter.min or parameter.max:
            try:
                lower = option.parse_value(parameter.min, locale) if parameter.min else None
                upper = option.parse_value(parameter.max, locale) if parameter.max else None
            except IllegalOptionValueError as e:
                raise SetupError(
                    f'The bounds of field "{name}" can not be converted by {type(option).__name__}.'
                ) from e
            option.add_validator(Interval(lower, upper))

        if parameter.choices:
            try:
                choices = [option.parse_value(choice, locale) for choice in parameter.choices]
            except IllegalOptionValueError as e:
                raise SetupError(
                    f'The choices of field "{name}" can not be converted by {type(option).__name__}.'
                ) from e
            option.add_validator(ValueSet(choices))

    @property
    def console(self) -> "Console":
        return self.parser.console

    @console.setter
    def console(self, console: Optional["Console"]):
        self.parser.console = console

    @property
    def remaining(self) -> list[str]:
        """Tokens from the most recent :meth:`read` that were not consumed as options or values."""
        return self.parser.remaining

    @property
    def options(self) -> dict[str, Option]:
        """Field name to option mapping."""
        return dict(self._fields)

    def read(self, tokens: None | str | Iterable[str] = None) -> T:
        """Parse ``tokens`` and assign the values to the target's fields.

        Fields whose option did not occur keep their current value.

        Parameters
        ----------
        tokens: None | str | Iterable[str]
            Command-line tokens. A string is split like a shell would;
            :obj:`None` uses ``sys.argv[1:]``.

        Returns
        -------
        T
            The (updated) target object.
        """
        try:
            self.parser.parse(normalize_tokens(tokens))
        except OptbindError as e:
            if self.usage_on_error:
                self.console.print(str(e), markup=False, highlight=False, emoji=False, soft_wrap=True)
                self.console.print()
                self.parser.print_usage()
            raise

        for name, option in self._fields.items():
            if not self.parser.has_values(option):
                if not hasattr(self.target, name):
                    continue
                value = getattr(self.target, name)
            else:
                value = self.parser.value(option)
            try:
                setattr(self.target, name, value)
            except AttributeError:
                if self.strict:
                    raise
                logger.debug("Could not assign %r to field %r of %r.", value, name, self.target, exc_info=True)

        return self.target

    def help_requested(self) -> bool:
        """Whether ``-h/--help`` occurred in the most recent :meth:`read`."""
        return self.help_option is not None and self.parser.has_values(self.help_option)

    def format_usage(self) -> str:
        return self.parser.format_usage()

    def print_usage(self, console: Optional["Console"] = None) -> None:
        self.parser.print_usage(console)
