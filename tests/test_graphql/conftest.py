"""GraphQL test fixtures.

Provides a Strawberry schema exposing the seeded document store as a Relay
connection.
"""

import pytest
import strawberry

from keyset_connection.graphql import PaginationInput, SortInput, create_connection_type


@strawberry.type
class ModelType:
    id: strawberry.ID
    name: str

    @classmethod
    def from_document(cls, doc: dict) -> "ModelType":
        return cls(id=strawberry.ID(str(doc["_id"])), name=doc["name"])


ModelConnection = create_connection_type(ModelType, "Model", to_node=ModelType.from_document)


@pytest.fixture
def schema(store) -> strawberry.Schema:
    """Schema whose ``models`` field paginates the seeded collection."""

    @strawberry.type
    class Query:
        @strawberry.field
        def models(
            self,
            pagination: PaginationInput | None = None,
            sort: SortInput | None = None,
        ) -> ModelConnection:  # type: ignore[valid-type]
            return ModelConnection(paginated=store.paginate(pagination=pagination, sort=sort))

    return strawberry.Schema(query=Query)
