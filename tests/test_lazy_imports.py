"""Tests for arbor.__init__ — every public name resolves lazily."""

import pytest

import arbor


@pytest.mark.parametrize("name", arbor.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(arbor, name)
    assert obj is not None, f"arbor.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        arbor.__getattr__("ThisDoesNotExist")
