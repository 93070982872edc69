"""Tests for the Strawberry connection types."""
from __future__ import annotations

import pytest

MODELS_QUERY = """
    query Models($first: Int, $after: String) {
        models(pagination: {first: $first, after: $after}, sort: {field: "name", order: DESC}) {
            totalCount
            edges {
                cursor
                node { id name }
            }
            pageInfo { hasNextPage endCursor }
        }
    }
"""


@pytest.mark.asyncio
async def test_first_page(schema) -> None:
    result = await schema.execute(MODELS_QUERY, variable_values={"first": 3})

    assert result.errors is None
    models = result.data["models"]
    assert models["totalCount"] == 8
    assert [edge["node"]["name"] for edge in models["edges"]] == ["some", "Foo", "foo"]
    assert [edge["cursor"] for edge in models["edges"]] == ["7", "2", "1"]
    assert models["edges"][0]["node"]["id"] == "7"
    assert models["pageInfo"] == {"hasNextPage": True, "endCursor": "1"}


@pytest.mark.asyncio
async def test_next_page(schema) -> None:
    result = await schema.execute(MODELS_QUERY, variable_values={"first": 3, "after": "1"})

    assert result.errors is None
    names = [edge["node"]["name"] for edge in result.data["models"]["edges"]]
    assert names == ["Bar", "bar", "another"]


@pytest.mark.asyncio
async def test_last_page(schema) -> None:
    result = await schema.execute(MODELS_QUERY, variable_values={"first": 10})

    assert result.errors is None
    assert len(result.data["models"]["edges"]) == 8
    assert result.data["models"]["pageInfo"]["hasNextPage"] is False


@pytest.mark.asyncio
async def test_only_requested_facets_run(schema, collection) -> None:
    """Selecting totalCount alone issues a single count."""
    result = await schema.execute("{ models { totalCount } }")

    assert result.errors is None
    assert result.data == {"models": {"totalCount": 8}}
    assert collection.calls == {"count_documents": 1}


@pytest.mark.asyncio
async def test_stale_cursor_surfaces_as_error(schema) -> None:
    result = await schema.execute(MODELS_QUERY, variable_values={"first": 3, "after": "999"})

    assert result.errors
    assert "No models record found" in result.errors[0].message


def test_schema_types(schema) -> None:
    sdl = str(schema)
    assert "type ModelConnection" in sdl
    assert "type ModelEdge" in sdl
    assert "type PageInfo" in sdl
    assert "input PaginationInput" in sdl
    assert "enum SortDirection" in sdl
