"""Store adapters consumed by the pagination engines."""

from keyset_connection.core.database.document import MongoQuery, MongoStore
from keyset_connection.core.database.protocols import DocumentStore, StoreQuery
from keyset_connection.core.database.relational import SqlAlchemyQuery, SqlAlchemyStore

__all__ = [
    "DocumentStore",
    "MongoQuery",
    "MongoStore",
    "SqlAlchemyQuery",
    "SqlAlchemyStore",
    "StoreQuery",
]
