"""Unit tests for TTL variants and cache entries."""

import datetime as dt

import pytest

from cachestore.core.errors import CacheError, NotSerializableError
from cachestore.core.models import At, CacheEntry, Duration, NoExpiry, coerce_ttl, resolve_ttl


class TestCoerceTTL:
    """Test mapping of accepted ttl shapes onto the TTL variant."""

    def test_none_uses_default(self):
        """Test that None selects the default, or NoExpiry without one."""
        assert coerce_ttl(None) == NoExpiry()
        assert coerce_ttl(None, Duration(30)) == Duration(30)

    def test_numbers_are_durations(self):
        """Test int and float seconds."""
        assert coerce_ttl(10) == Duration(10.0)
        assert coerce_ttl(0.5) == Duration(0.5)
        assert coerce_ttl(-1) == Duration(-1.0)

    def test_timedelta_is_duration(self):
        """Test timedelta conversion."""
        assert coerce_ttl(dt.timedelta(minutes=2)) == Duration(120.0)

    def test_datetime_is_absolute(self):
        """Test aware datetime conversion to a timestamp."""
        when = dt.datetime(2030, 1, 1, tzinfo=dt.timezone.utc)
        assert coerce_ttl(when) == At(when.timestamp())

    def test_variants_pass_through(self):
        """Test that explicit variants are returned as-is."""
        for ttl in (NoExpiry(), Duration(3), At(123.0)):
            assert coerce_ttl(ttl, Duration(99)) is ttl

    @pytest.mark.parametrize("ttl", [True, False, "10", [10], object()])
    def test_unsupported_types(self, ttl):
        """Test that bools and other types raise TypeError."""
        with pytest.raises(TypeError):
            coerce_ttl(ttl)

    @pytest.mark.parametrize("ttl", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_rejected(self, ttl):
        """Test that NaN and infinite durations raise ValueError."""
        with pytest.raises(ValueError):
            coerce_ttl(ttl)

    def test_variants_require_finite_numbers(self):
        """Test Duration and At validate their field on construction."""
        with pytest.raises(ValueError):
            Duration(float("nan"))
        with pytest.raises(ValueError):
            At(float("inf"))
        with pytest.raises(TypeError):
            Duration("10")
        with pytest.raises(TypeError):
            At(True)


class TestResolveTTL:
    """Test resolution to an absolute expiration timestamp."""

    def test_resolve(self):
        """Test each variant against a fixed now."""
        assert resolve_ttl(NoExpiry(), 100.0) is None
        assert resolve_ttl(Duration(5), 100.0) == 105.0
        assert resolve_ttl(At(42.0), 100.0) == 42.0


class TestCacheEntry:
    """Test CacheEntry expiry check."""

    def test_is_expired(self):
        """Test boundaries of is_expired."""
        assert CacheEntry("k", b"v").is_expired(1e12) is False
        entry = CacheEntry("k", b"v", expires_at=10.0)
        assert entry.is_expired(9.99) is False
        assert entry.is_expired(10.0) is True
        assert entry.is_expired(11.0) is True


class TestErrors:
    """Test structured error formatting."""

    def test_str_and_repr_include_context(self):
        """Test that context shows up in str and repr."""
        err = NotSerializableError("cannot encode", {"key": "k", "value_type": "function"})
        assert str(err) == "cannot encode (key='k', value_type='function')"
        assert "NotSerializableError" in repr(err)
        assert isinstance(err, CacheError)
        assert isinstance(err, TypeError)

    def test_str_without_context(self):
        """Test plain message formatting."""
        assert str(CacheError("boom")) == "boom"
        assert CacheError("boom").context == {}
