from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Optional, TypeVar

from optbind._locale import DEFAULT_LOCALE, resolve_locale
from optbind.exceptions import NotFlagError, SetupError, UnknownOptionError, UnknownSuboptionError
from optbind.option import HelpOption, Option, option_sort_key
from optbind.utils import DEFAULT_APPLICATION_NAME, normalize_tokens

if TYPE_CHECKING:
    from babel import Locale
    from rich.console import Console, ConsoleOptions, RenderResult

T = TypeVar("T")

END_OF_OPTIONS_DELIMITER = "--"


class _VerbatimText:
    """Rich renderable that emits text as-is; tabs are not expanded."""

    def __init__(self, text: str):
        self.text = text

    def __rich_console__(self, console: "Console", options: "ConsoleOptions") -> "RenderResult":
        from rich.segment import Segment

        for line in self.text.splitlines():
            yield Segment(line)
            yield Segment.line()


class Parser:
    """Largely GNU-compatible command-line option parser.

    Supports short (``-v``) and long (``--verbose``) options, options with values
    (``-d 2``, ``--debug 2``, ``--debug=2``) and combined short flags (``-dv``).
    Option processing can be explicitly terminated with ``--``.

    Example usage:

    .. code-block:: python

        from optbind import BooleanOption, IntegerOption, Parser

        parser = Parser(application_name="my-script")
        verbose = parser.add_option(BooleanOption("verbose", short="v"))
        size = parser.add_option(IntegerOption("size", "size of something", short="s"))

        parser.parse(["-v", "--size=100", "rest"])
        parser.value(verbose)  # True
        parser.value(size)  # 100
        parser.remaining  # ["rest"]

    Parameters
    ----------
    application_name: str
        Name shown in the usage text.
    locale: babel.Locale | str
        Default locale for locale-sensitive conversions; ``parse`` may override it per call.
    console: rich.console.Console | None
        Output sink for usage text. Defaults to a console writing to stderr.
    """

    def __init__(
        self,
        application_name: str = DEFAULT_APPLICATION_NAME,
        *,
        locale: "Locale | str" = DEFAULT_LOCALE,
        console: Optional["Console"] = None,
    ):
        self.application_name = application_name
        self.locale = locale
        self._console = console
        self._fallback_console: Optional["Console"] = None
        self._options: list[Option] = []
        self._lookup: dict[str, Option] = {}
        self._values: dict[str, list[Any]] = {}
        self._remaining: list[str] = []

    @property
    def locale(self) -> "Locale":
        return self._locale

    @locale.setter
    def locale(self, locale: "Locale | str"):
        self._locale = resolve_locale(locale)

    @property
    def console(self) -> "Console":
        if self._console is not None:
            return self._console

        if self._fallback_console is None:
            from rich.console import Console

            self._fallback_console = Console(stderr=True)

        return self._fallback_console

    @console.setter
    def console(self, console: Optional["Console"]):
        self._console = console

    @property
    def options(self) -> tuple[Option, ...]:
        """Registered options, in registration order."""
        return tuple(self._options)

    @property
    def remaining(self) -> list[str]:
        """Tokens from the most recent :meth:`parse` that were not consumed as options or values."""
        return list(self._remaining)

    def add_option(self, option: Option[T]) -> Option[T]:
        """Register ``option``; returns it for convenience.

        Raises
        ------
        SetupError
            One of the option's names is already taken.
        """
        for name in option.names:
            if name in self._lookup:
                raise SetupError(f'Option name "{name}" is already registered.')
        for name in option.names:
            self._lookup[name] = option
        self._options.append(option)
        return option

    def add_help_option(self) -> HelpOption:
        """Register ``-h/--help``, which prints the usage text every time it is parsed."""
        option = HelpOption(callback=self.print_usage)
        self.add_option(option)
        return option

    def parse(self, tokens: None | str | Iterable[str] = None, locale: "Locale | str | None" = None) -> list[str]:
        """Extract option values and leftover tokens from ``tokens``.

        Values from any previous call are discarded first. If parsing fails,
        no values and no leftover tokens are retained.

        Parameters
        ----------
        tokens: None | str | Iterable[str]
            Command-line tokens. A string is split like a shell would;
            :obj:`None` uses ``sys.argv[1:]``.
        locale: babel.Locale | str | None
            Locale for this call; defaults to :attr:`locale`.

        Returns
        -------
        list[str]
            Leftover tokens, same as :attr:`remaining`.

        Raises
        ------
        UnknownOptionError
            A token does not match any registered option.
            :exc:`.UnknownSuboptionError` and :exc:`.NotFlagError` for combined short flags.
        IllegalOptionValueError
            A value is missing, could not be converted, or was rejected by a validator.
        """
        tokens = normalize_tokens(tokens)
        locale = self.locale if locale is None else resolve_locale(locale)

        self._values.clear()
        self._remaining.clear()

        values: dict[str, list[Any]] = {}
        remaining: list[str] = []
        options_enabled = True
        position = 0

        while position < len(tokens):
            token = tokens[position]
            position += 1

            if not options_enabled or not token.startswith("-"):
                remaining.append(token)
                continue

            if token == END_OF_OPTIONS_DELIMITER:
                options_enabled = False
                continue

            raw = None
            if token.startswith("--"):
                keyword, equals, attached = token.partition("=")
                if equals:
                    raw = attached
            elif len(token) > 2:
                # Combined short flags, e.g. "-dv".
                for char in token[1:]:
                    option = self._lookup.get(f"-{char}")
                    if option is None:
                        raise UnknownSuboptionError(token=token, suboption=char, candidates=tuple(self._lookup))
                    if option.value_needed:
                        raise NotFlagError(token=token, suboption=char, candidates=tuple(self._lookup))
                    values.setdefault(option.long, []).append(option.get_value(None, locale))
                continue
            else:
                keyword = token

            option = self._lookup.get(keyword)
            if option is None:
                raise UnknownOptionError(token=token, candidates=tuple(self._lookup))

            if not option.value_needed:
                raw = None
            elif raw is None and position < len(tokens):
                raw = tokens[position]
                position += 1

            values.setdefault(option.long, []).append(option.get_value(raw, locale))

        self._values.update(values)
        self._remaining.extend(remaining)
        return self.remaining

    def value(self, option: Option[T], default: Any = None) -> T | Any:
        """First value parsed for ``option``, or ``default`` if it didn't occur."""
        try:
            return self._values[option.long][0]
        except (KeyError, IndexError):
            return default

    def values(self, option: Option[T]) -> list[T]:
        """All values parsed for ``option``, in command-line order."""
        return list(self._values.get(option.long, ()))

    def has_values(self, option: Option) -> bool:
        return bool(self._values.get(option.long))

    def format_usage(self) -> str:
        lines = [f"usage: {self.application_name} [options]", "options:"]
        lines.extend(f"\t{option}" for option in sorted(self._options, key=option_sort_key))
        return "\n".join(lines) + "\n"

    def print_usage(self, console: Optional["Console"] = None) -> None:
        """Print the usage text.

        Parameters
        ----------
        console: rich.console.Console | None
            Console to print to; defaults to :attr:`console`.
        """
        console = console or self.console
        console.print(_VerbatimText(self.format_usage()), soft_wrap=True)
