from typing import Any, TypeVar

from optbind.utils import frozen

T = TypeVar("T")


@frozen(kw_only=True)
class Application:
    """Class-level command-line declarations for a :class:`.Reader` target.

    Used as a class decorator:

    .. code-block:: python

        from optbind import Application


        @Application(name="TestApp", help=True, usage_on_error=True)
        class Config: ...
    """

    name: str | None = None
    """Application name for the usage text."""

    name_from_package: bool = False
    """Derive the application name from the packaged artifact (zipapp, wheel, ...) the program was started from.

    Falls back to :attr:`name` when the program isn't running from such an artifact.
    """

    help: bool = False
    """Register ``-h/--help``, which prints the usage text."""

    usage_on_error: bool = False
    """Print the error message and the usage text before a parse error propagates."""

    def __call__(self, obj: T) -> T:
        obj.__optbind__ = self  # pyright: ignore[reportAttributeAccessIssue]
        return obj


DEFAULT_APPLICATION = Application()


def get_application(obj: Any) -> Application:
    """Application declarations of ``obj`` (a class or an instance), inherited from base classes."""
    return getattr(obj, "__optbind__", DEFAULT_APPLICATION)
