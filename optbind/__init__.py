__version__ = "0.1.0"

__all__ = [
    "Application",
    "BooleanOption",
    "DateOption",
    "DEFAULT_LOCALE",
    "DoubleOption",
    "FloatOption",
    "HelpOption",
    "IllegalOptionValueError",
    "IntegerOption",
    "LongOption",
    "NotFlagError",
    "OPTION_TYPES",
    "OptbindError",
    "Option",
    "Parameter",
    "Parser",
    "Reader",
    "SetupError",
    "StringOption",
    "UnknownOptionError",
    "UnknownSuboptionError",
    "Validator",
    "application_name_from_package",
    "types",
    "validators",
]

from optbind import validators
from optbind._locale import DEFAULT_LOCALE
from optbind.application import Application
from optbind.exceptions import (
    IllegalOptionValueError,
    NotFlagError,
    OptbindError,
    SetupError,
    UnknownOptionError,
    UnknownSuboptionError,
)
from optbind.option import (
    OPTION_TYPES,
    BooleanOption,
    DateOption,
    DoubleOption,
    FloatOption,
    HelpOption,
    IntegerOption,
    LongOption,
    Option,
    StringOption,
)
from optbind.parameter import Parameter
from optbind.parser import Parser
from optbind.protocols import Validator
from optbind.reader import Reader
from optbind.utils import application_name_from_package

# Submodules that are only needed when explicitly accessed by user code.
_LAZY_IMPORTS = {
    "types": "optbind.types",
}


def __getattr__(name: str):
    """Lazy-load opt-in submodules."""
    if name in _LAZY_IMPORTS:
        import importlib

        module = importlib.import_module(_LAZY_IMPORTS[name])
        globals()[name] = module
        return module
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
