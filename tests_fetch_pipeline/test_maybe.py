"""
Tests for maybe.py
Logic testing: Decision/Branch coverage over both variants
"""
import pytest

from fetch_pipeline.maybe import Absent, Present


class TestPresent:
    """Tests for Present."""

    def test_is_present(self):
        assert Present(1).is_present is True

    def test_unwrap_returns_value(self):
        assert Present("value").unwrap() == "value"

    def test_expect_returns_value_without_raising(self):
        assert Present(0).expect(RuntimeError("unused")) == 0

    def test_unwrap_or_ignores_default(self):
        assert Present(None).unwrap_or("default") is None

    def test_map_applies_function(self):
        assert Present(2).map(lambda v: v * 3) == Present(6)

    def test_equality_by_value(self):
        assert Present([1]) == Present([1])
        assert Present(1) != Present(2)
        assert Present(1) != Absent()


class TestAbsent:
    """Tests for Absent."""

    def test_is_not_present(self):
        assert Absent().is_present is False

    def test_unwrap_raises(self):
        with pytest.raises(ValueError, match="absent"):
            Absent().unwrap()

    def test_expect_raises_given_error(self):
        error = KeyError("missing")
        with pytest.raises(KeyError) as exc_info:
            Absent().expect(error)
        assert exc_info.value is error

    def test_unwrap_or_returns_default(self):
        assert Absent().unwrap_or("default") == "default"

    def test_map_skips_function(self):
        calls = []
        assert Absent().map(calls.append) == Absent()
        assert calls == []

    def test_all_absent_values_are_equal(self):
        assert Absent() == Absent()
        assert hash(Absent()) == hash(Absent())
