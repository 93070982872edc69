"""Unit tests for type-ahead criteria and pagination."""
from __future__ import annotations

import re

import pytest

from keyset_connection.core.exceptions import InvalidInputError
from keyset_connection.core.pagination.engine import Pagination
from keyset_connection.core.pagination.sort import SortOrder
from keyset_connection.core.pagination.type_ahead import TypeAhead, TypeAheadPosition


class Identity:
    def __init__(self, value: str) -> None:
        self.value = value


@pytest.mark.unit
class TestTypeAheadConstruction:
    """Tests for TypeAhead input validation."""

    @pytest.mark.parametrize(("field", "term"), [("", "foo"), (None, "foo"), ("name", ""), ("name", None)])
    def test_field_and_term_are_required(self, field, term):
        with pytest.raises(InvalidInputError, match="must be specified"):
            TypeAhead(field, term)

    def test_unknown_position(self):
        with pytest.raises(InvalidInputError) as exc_info:
            TypeAhead("name", "foo", position="middle")
        assert exc_info.value.field == "position"

    def test_defaults(self):
        type_ahead = TypeAhead("name", "foo")
        assert type_ahead.position is TypeAheadPosition.CONTAINS
        assert type_ahead.escape is True
        assert type_ahead.case_sensitive is False
        assert type_ahead.criteria == {}

    def test_criteria_are_copied(self):
        criteria = {"status": {"$in": ["a"]}}
        type_ahead = TypeAhead("name", "foo", criteria)
        criteria["status"]["$in"].append("b")

        returned = type_ahead.criteria
        returned["extra"] = 1

        assert type_ahead.criteria == {"status": {"$in": ["a"]}}

    def test_shallow_copy_keeps_special_values(self):
        identity = Identity("abc")
        type_ahead = TypeAhead("name", "foo", {"_id": identity})
        assert type_ahead.criteria["_id"] is identity

    def test_deep_copy_clones_special_values(self):
        identity = Identity("abc")
        type_ahead = TypeAhead("name", "foo", {"_id": identity}, deep=True)
        assert type_ahead.criteria["_id"] is not identity
        assert type_ahead.criteria["_id"].value == "abc"


@pytest.mark.unit
class TestBuildRegex:
    """Tests for TypeAhead.build_regex."""

    @pytest.mark.parametrize(
        ("position", "pattern"),
        [
            ("contains", "foo"),
            ("starts-with", "^foo"),
            ("ends-with", "foo$"),
            ("exact-match", "^foo$"),
        ],
    )
    def test_positions(self, position, pattern):
        regex = TypeAhead("name", "foo", position=position).build_regex()
        assert regex.pattern == pattern
        assert regex.flags & re.IGNORECASE

    def test_case_sensitive(self):
        regex = TypeAhead("name", "foo", case_sensitive=True).build_regex()
        assert not regex.flags & re.IGNORECASE

    def test_escapes_metacharacters(self):
        regex = TypeAhead("name", "a.b*(c)", position="exact-match").build_regex()
        assert regex.search("a.b*(c)")
        assert not regex.search("axbbb(c)")

    def test_escape_disabled(self):
        regex = TypeAhead("name", "a.c", escape=False).build_regex()
        assert regex.search("abc")


@pytest.mark.unit
class TestBuildCriteria:
    """Tests for TypeAhead.build_criteria."""

    def test_merges_criteria_and_sorts_by_field(self):
        query = TypeAhead("name", "foo", {"deleted": False}).build_criteria()
        assert query.criteria["deleted"] is False
        assert query.criteria["name"].pattern == "foo"
        assert query.sort == {"field": "name", "order": SortOrder.ASCENDING}

    def test_pattern_overrides_existing_field_criteria(self):
        query = TypeAhead("name", "foo", {"name": "bar"}).build_criteria()
        assert isinstance(query.criteria["name"], re.Pattern)


@pytest.mark.unit
class TestTypeAheadPaginate:
    """Tests for TypeAhead.paginate."""

    @pytest.mark.asyncio
    async def test_paginates_matches(self, store):
        paginated = TypeAhead("name", "b").paginate(store, {"first": 10})

        assert isinstance(paginated, Pagination)
        assert paginated.sort.field == "name"
        edges = await paginated.edges()
        assert [edge.node["name"] for edge in edges] == ["Abba", "bar", "Bar"]
        assert await paginated.total_count() == 3

    @pytest.mark.asyncio
    async def test_starts_with_and_criteria(self, store):
        type_ahead = TypeAhead("name", "f", {"deleted": False}, position="starts-with")
        paginated = type_ahead.paginate(store, {"first": 1})

        edges = await paginated.edges()
        assert [edge.node["name"] for edge in edges] == ["foo"]
        assert await paginated.has_next_page() is True

    @pytest.mark.asyncio
    async def test_options_pass_through(self, store):
        paginated = TypeAhead("name", "o").paginate(store, limit_options={"default": 2})
        assert paginated.first.value == 2
