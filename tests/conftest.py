import pytest

from luna.interpreter import Interpreter
from luna.printer import to_write_string


@pytest.fixture
def interp():
    """A fresh interpreter with the builtins only."""
    return Interpreter()


@pytest.fixture
def run(interp):
    """Evaluate source in a fresh interpreter and return the result in `write` form."""
    def _run(code: str) -> str:
        return to_write_string(interp.eval(code))
    return _run
