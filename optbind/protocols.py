from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Validator(Protocol):
    """Predicate over a converted option value.

    ``str(validator)`` is appended to the option's line in the usage text.
    """

    def validate(self, value: Any) -> bool: ...
