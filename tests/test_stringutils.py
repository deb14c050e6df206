import pytest

from dockcompose.stringutils import string_contains, string_to_bool


def test_string_contains_found():
    assert string_contains(["a", "b", "c"], "b") is True


def test_string_contains_missing():
    assert string_contains(["a", "b"], "z") is False


def test_string_contains_empty():
    assert string_contains([], "a") is False


@pytest.mark.parametrize("value", ["1", "t", "T", "true", "TRUE", "True", "  true\n"])
def test_string_to_bool_true(value):
    assert string_to_bool(value) is True


@pytest.mark.parametrize("value", ["0", "f", "false", "FALSE", "", "yes", "garbage"])
def test_string_to_bool_false(value):
    assert string_to_bool(value) is False