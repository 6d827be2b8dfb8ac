import pytest

from walter.codegen import generate_module
from walter.utils.helpers import parse_code


@pytest.fixture
def lower():
    """Source text to a verified LLVM module."""
    def _lower(source):
        return generate_module(parse_code(source))
    return _lower
