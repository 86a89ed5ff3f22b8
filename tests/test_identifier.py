"""Tests for identifier generation and validation."""

import pytest

from shortlink.errors import IdentifierGenerationError, InternalError
from shortlink.identifier import IdentifierCodec
from shortlink.routes import Route, reserved_segments


class TestIdentifierCodec:
    """Test identifier generation and validation."""

    @pytest.mark.parametrize("link_id", ["", "/", "abc-xyz", "Health", "lInKs"])
    def test_validate_rejects(self, codec, link_id):
        assert not codec.validate_id(link_id)

    @pytest.mark.parametrize("link_id", ["abc", "BAD", "a", "0123456789", "healthy"])
    def test_validate_accepts(self, codec, link_id):
        assert codec.validate_id(link_id)

    @pytest.mark.parametrize("segment", ["health", "METRICS", "Docs", "create", "links"])
    def test_reserved_segments_any_case(self, codec, segment):
        """Every route's first segment is reserved regardless of case."""
        assert not codec.validate_id(segment)

    def test_validate_rejects_non_strings(self, codec):
        assert not codec.validate_id(None)
        assert not codec.validate_id(12345)

    def test_validate_rejects_non_ascii(self, codec):
        assert not codec.validate_id("café")
        assert not codec.validate_id("١٢٣")

    def test_generate_many(self, codec):
        """Generated identifiers always validate."""
        for _ in range(1000):
            link_id = codec.generate_id()
            assert len(link_id) == 5
            assert codec.validate_id(link_id)

    def test_generate_custom_length(self):
        codec = IdentifierCodec(length=12)

        link_id = codec.generate_id()

        assert len(link_id) == 12
        assert codec.validate_id(link_id)

    def test_generate_is_not_repeating(self, codec):
        ids = {codec.generate_id() for _ in range(200)}
        assert len(ids) > 190

    def test_generate_exhausts_attempts(self):
        """A codec that can only produce reserved IDs fails loudly."""
        codec = IdentifierCodec(length=1, reserved=list(IdentifierCodec.ALPHABET.lower()))

        with pytest.raises(IdentifierGenerationError) as exc_info:
            codec.generate_id()

        assert isinstance(exc_info.value, InternalError)
        assert exc_info.value.message == "Something went wrong"

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            IdentifierCodec(length=0)


class TestRouteRegistry:
    """Test the route registry the codec reserves."""

    def test_first_segment(self):
        assert Route.LINK_GET.first_segment == "links"
        assert Route.LINK_CREATE.first_segment == "create"
        assert Route.HEALTH.first_segment == "health"

    def test_reserved_segments(self):
        reserved = set(reserved_segments())

        assert {"health", "metrics", "docs", "create", "links"} <= reserved

    def test_redirect_route_is_last(self):
        assert list(Route)[-1] is Route.LINK_REDIRECT
