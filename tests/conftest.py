import pytest
from rich.console import Console

from optbind import Parser


@pytest.fixture
def console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def parser(console):
    return Parser(console=console)

