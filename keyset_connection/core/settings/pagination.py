"""Pagination settings.

Centralized defaults for page size, sort collation and the ranking sort used
by search pagination. Every engine reads these unless explicit options are
passed at construction.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=25, PAGINATION_MAX_LIMIT=100
"""

from __future__ import annotations

from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_limit: Page size used when ``first`` is missing or invalid.
        max_limit: Hard upper bound for ``first``.
        collation_locale: Default collation locale for sorted store queries.
        created_field: Field treated as a creation timestamp; sorting by it
            collapses to the identity field.
        search_sort: Ranking sort owned by search pagination. The last entry
            must be a unique tie-breaker.
        log_queries: Emit DEBUG lines for every store round trip.

    Example:
        settings = PaginationSettings(default_limit=25)
        limit = Limit.resolve(first, default=settings.default_limit,
                              maximum=settings.max_limit)
    """

    default_limit: int = Field(
        default=10,
        ge=1,
        le=10000,
        description="Default page size when first is not specified",
    )
    max_limit: int = Field(
        default=200,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    collation_locale: str = Field(
        default="en_US",
        min_length=1,
        description="Default collation locale applied to sorted queries",
    )
    created_field: str = Field(
        default="createdAt",
        description="Creation timestamp field that resolves to the identity field",
    )
    search_sort: list[dict[str, str]] = Field(
        default_factory=lambda: [{"_score": "desc"}, {"_id": "asc"}],
        min_length=1,
        description="Sort clauses owned by search pagination",
    )
    log_queries: bool = Field(
        default=True,
        description="Log each store round trip at DEBUG",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _default_within_max(self) -> Self:
        if self.default_limit > self.max_limit:
            msg = (
                f"default_limit ({self.default_limit}) must not exceed "
                f"max_limit ({self.max_limit})"
            )
            raise ValueError(msg)
        return self
