from types import NoneType, UnionType
from typing import TYPE_CHECKING, Any, Optional, Union, get_args, get_origin

import attrs
from attrs import field

from optbind.utils import frozen, to_tuple_converter

if TYPE_CHECKING:
    from optbind.option import Option


@frozen(kw_only=True)
class Parameter:
    """Command-line declaration for a field, attached with :obj:`~typing.Annotated`.

    Example usage:

    .. code-block:: python

        from typing import Annotated

        from optbind import Parameter, Reader


        class Config:
            size: Annotated[int, Parameter(short="s", description="a fancy size value", min="0", max="100")] = 10
            text: Annotated[str, Parameter(choices=("foo", "Hello World"))] = "foo"


        config = Reader(Config).read(["-s", "50"])
        config.size  # 50

    Bounds and choices are given as command-line strings and converted by the
    field's option when the :class:`.Reader` is created.
    """

    short: str | None = None
    """Single character short form, e.g. ``"s"`` for ``-s``."""

    long: str | None = None
    """Long form without hyphens. Defaults to the field name."""

    description: str = field(default="", converter=attrs.converters.default_if_none(""))

    min: str | None = None
    """Smallest accepted value, as it would be written on the command-line."""

    max: str | None = None
    """Largest accepted value, as it would be written on the command-line."""

    choices: tuple[str, ...] = field(default=(), converter=to_tuple_converter)
    """Admissible values, as they would be written on the command-line."""

    option_type: Optional[type["Option"]] = None
    """Override the :class:`.Option` subclass otherwise derived from the field's type."""

    @classmethod
    def combine(cls, *parameters: Optional["Parameter"]) -> "Parameter":
        """Returns a new Parameter with combined values of all provided ``parameters``.

        Later parameters take priority; only attributes that differ from the defaults are carried over.
        """
        kwargs = {}
        for parameter in parameters:
            if parameter is None:
                continue
            for a in attrs.fields(cls):
                value = getattr(parameter, a.name)
                if value != a.default:
                    kwargs[a.name] = value
        return cls(**kwargs)


def resolve_optional(hint: Any) -> Any:
    """Strip a ``None`` member from a union, e.g. ``Optional[int]`` -> ``int``."""
    if get_origin(hint) in (Union, UnionType):
        args = tuple(x for x in get_args(hint) if x is not NoneType)
        if len(args) == 1:
            return args[0]
    return hint


def get_parameters(hint: Any) -> tuple[Any, list[Parameter]]:
    """Split an annotation into its value type and the :class:`Parameter` markers it carries.

    Nested :obj:`~typing.Annotated` aliases (like those in :mod:`optbind.types`)
    contribute their parameters outermost-last, so outer declarations take priority.

    Returns
    -------
    hint
        Annotation hint with :obj:`~typing.Annotated` and :obj:`~typing.Optional` resolved.
    list[Parameter]
        Parameters discovered.
    """
    parameters = []
    hint = resolve_optional(hint)
    if hasattr(hint, "__metadata__"):
        inner = get_args(hint)
        # Annotated flattens nested Annotated aliases; metadata is ordered innermost-first.
        hint = resolve_optional(inner[0])
        parameters.extend(x for x in inner[1:] if isinstance(x, Parameter))
    return hint, parameters
