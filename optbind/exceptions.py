from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Optional

from attrs import define, field

if TYPE_CHECKING:
    from optbind.option import Option


__all__ = [
    "IllegalOptionValueError",
    "NotFlagError",
    "OptbindError",
    "SetupError",
    "UnknownOptionError",
    "UnknownSuboptionError",
]


class SetupError(ValueError):
    """An option registry or reader could not be constructed from the provided declarations."""

    # This doesn't derive from OptbindError since this is a developer error
    # rather than a runtime error.


@define
class OptbindError(Exception):
    """Root exception for runtime (parse-time) errors."""

    msg: str | None = None
    """
    If set, override automatic message generation.
    """

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return ""


@define(kw_only=True)
class UnknownOptionError(OptbindError):
    """Unknown/unregistered option provided by the cli.

    A nearest-neighbor option suggestion may be printed.
    """

    token: str
    """Full command-line token that did not match any registered option."""

    candidates: Sequence[str] = field(factory=tuple)
    """Registered option names (e.g. ``"-v"``, ``"--verbose"``) for suggestions."""

    def __str__(self):
        if self.msg is not None:
            return self.msg

        response = f'Unknown option: "{self.token}".'

        keyword = self.token.split("=", 1)[0]
        if keyword and self.candidates:
            import difflib

            close_matches = difflib.get_close_matches(keyword, self.candidates, n=1, cutoff=0.6)
            if close_matches:
                response += f' Did you mean "{close_matches[0]}"?'

        return response


@define(kw_only=True)
class UnknownSuboptionError(UnknownOptionError):
    """A character within combined short flags (e.g. ``-dv``) is not a registered flag."""

    suboption: str
    """The offending character."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return f'Unknown option "{self.suboption}" in "{self.token}".'


@define(kw_only=True)
class NotFlagError(UnknownOptionError):
    """A character within combined short flags refers to an option that requires a value."""

    suboption: str
    """The offending character."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return f'Option "{self.suboption}" in "{self.token}" requires a value and cannot be combined with other flags.'


@define(kw_only=True)
class IllegalOptionValueError(OptbindError):
    """A value could not be converted, failed validation, or was missing entirely."""

    option: "Option"
    """Option that received the value."""

    value: str = ""
    """Raw command-line string; empty if no value was supplied."""

    validator: Optional[Any] = None
    """Validator that rejected the converted value, if any."""

    missing: bool = False
    """The option requires a value, but the command-line ended before one was supplied."""

    def __str__(self):
        if self.msg is not None:
            return self.msg

        if self.missing:
            return f'Option "{self.option.display_name}" requires a value.'

        message = f'Illegal value "{self.value}" for option "{self.option.display_name}".'
        if self.validator is not None:
            message += f" Expected {self.validator}."
        elif isinstance(self.__cause__, Exception) and str(self.__cause__):
            message += f" {self.__cause__}"
        return message
