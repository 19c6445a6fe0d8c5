"""Pydantic contracts shared across the store adapters, services and API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


SEARCH_FIELDS: tuple[str, ...] = ("title", "description", "price")


class _CamelModel(BaseModel):
    """Base for models exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionRecord(_CamelModel):
    """Sales transaction as persisted by the record store (read-only here)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    title: str | None = None
    description: str | None = None
    price: int | float | str | None = None
    category: str | None = None
    image: str | None = None
    date_of_sale: datetime | None = None
    sold: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class MonthFilter(BaseModel):
    """Match records sold in a calendar month; month 0 matches everything."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    month: int

    @property
    def matches_all(self) -> bool:
        return self.month == 0

    @property
    def matches_none(self) -> bool:
        return not 0 <= self.month <= 12


class SearchFilter(BaseModel):
    """Case-insensitive substring match over any of the searchable fields."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str = ""
    fields: tuple[str, ...] = SEARCH_FIELDS

    @property
    def matches_all(self) -> bool:
        return not self.text


class TransactionFilter(BaseModel):
    """Logical AND of a month filter and a search filter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    month: MonthFilter
    search: SearchFilter = Field(default_factory=SearchFilter)


class Pagination(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    skip: int = Field(ge=0)
    limit: int = Field(gt=0)

    @property
    def page(self) -> int:
        """Return the 1-indexed page matching this window."""
        return self.skip // self.limit + 1


class TransactionsPage(_CamelModel):
    success: bool = True
    total_count: int
    page: int
    limit: int
    month: int
    transactions: list[TransactionRecord]


class SalesStatistics(_CamelModel):
    total_count: int = 0
    total_sale: str = "0.00"
    sold_count: int = 0
    unsold_count: int = 0


class CombinedData(_CamelModel):
    stats_data: SalesStatistics
    bar_chart_data: dict[str, int]
    pie_chart_data: dict[str, int]
