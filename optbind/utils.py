"""To prevent circular dependencies, this module should never import anything else from optbind."""

import functools
import shlex
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

# https://threeofwands.com/attra-iv-zero-overhead-frozen-attrs-classes/
if TYPE_CHECKING:
    from attrs import frozen
else:
    from attrs import define

    frozen = functools.partial(define, unsafe_hash=True)

DEFAULT_APPLICATION_NAME = "appname"

PACKAGE_SUFFIXES = (".pyz", ".pyzw", ".zip", ".whl", ".egg")


def is_iterable(obj) -> bool:
    if isinstance(obj, list | tuple | set | frozenset | dict):  # Fast path for common types
        return True
    return not isinstance(obj, str) and isinstance(obj, Iterable)


def to_tuple_converter(value: None | Any | Iterable[Any]) -> tuple[Any, ...]:
    """Convert a single element or an iterable of elements into a tuple.

    Intended to be used in an ``attrs.Field``. If :obj:`None` is provided, returns an empty tuple.
    If a single element is provided, returns a tuple containing just that element.
    If an iterable is provided, converts it into a tuple.

    Parameters
    ----------
    value: Any | Iterable[Any] | None
        An element, an iterable of elements, or None.

    Returns
    -------
    tuple[Any, ...]: A tuple containing the elements.
    """
    if value is None:
        return ()
    elif is_iterable(value):
        return tuple(value)
    else:
        return (value,)


def to_list_converter(value: None | Any | Iterable[Any]) -> list[Any]:
    return list(to_tuple_converter(value))


def normalize_tokens(tokens: None | str | Iterable[str]) -> list[str]:
    if tokens is None:
        tokens = sys.argv[1:]  # Remove the executable
    elif isinstance(tokens, str):
        tokens = shlex.split(tokens)
    else:
        tokens = list(tokens)
    return tokens


def application_name_from_package(entry: str | Path | None) -> str | None:
    """Derive an application name from the location of a packaged artifact.

    Only paths that point at a packaged artifact (zipapp, zip, wheel or egg)
    yield a name; anything else (a plain script, an interpreter path) returns
    :obj:`None` so the caller can keep its configured name.

    Parameters
    ----------
    entry: str | Path | None
        Typically ``sys.argv[0]`` or the first entry of ``sys.path``.

    Returns
    -------
    str | None
        The artifact's file name, e.g. ``"tool.pyz"``.
    """
    if not entry:
        return None
    path = Path(entry)
    if path.suffix.lower() not in PACKAGE_SUFFIXES:
        return None
    return path.name
