"""Category filtering and page slicing for the transaction list and chips."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, Mapping, Sequence, TypeVar

import pandas as pd

from . import features

DEFAULT_TRANSACTION_PAGE_SIZE = 5
DEFAULT_CATEGORY_PAGE_SIZE = 3
ALL_CATEGORIES = "All"

T = TypeVar("T")


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValueError(f"page_size must be a positive integer, got {page_size!r}")


def total_pages(length: int, page_size: int) -> int:
    """Number of pages needed for ``length`` items (0 items -> 0 pages)."""

    _check_page_size(page_size)
    return math.ceil(max(length, 0) / page_size)


def paginate(items, page: int, page_size: int):
    """Return the 1-indexed ``page`` of ``items``.

    Pages before the first or past the last come back empty rather than
    raising. DataFrames are sliced positionally and stay DataFrames.
    """

    _check_page_size(page_size)
    if page < 1:
        start = end = 0
    else:
        start = (page - 1) * page_size
        end = page * page_size
    if isinstance(items, pd.DataFrame):
        return items.iloc[start:end]
    return list(items[start:end])


@dataclass
class Paginator(Generic[T]):
    """A page cursor over a fixed sequence."""

    items: Sequence[T]
    page_size: int
    page: int = 1

    def __post_init__(self) -> None:
        _check_page_size(self.page_size)

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.items), self.page_size)

    @property
    def current(self) -> list[T]:
        return paginate(self.items, self.page, self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def go_to(self, page: int) -> list[T]:
        self.page = page
        return self.current

    def next_page(self) -> list[T]:
        if self.has_next:
            self.page += 1
        return self.current

    def previous_page(self) -> list[T]:
        if self.has_previous:
            self.page -= 1
        return self.current


def default_category_labels() -> list[str]:
    """``All`` followed by the expense then income suggestions, de-duplicated."""

    labels = [ALL_CATEGORIES]
    for txn_type in ("expense", "income"):
        for name in features.suggested_categories(txn_type):
            if name not in labels:
                labels.append(name)
    return labels


class CategoryChips(Paginator[str]):
    """Paged category selector, independent of the transaction list."""

    def __init__(
        self,
        labels: Sequence[str] | None = None,
        page_size: int = DEFAULT_CATEGORY_PAGE_SIZE,
    ) -> None:
        super().__init__(
            items=list(labels) if labels is not None else default_category_labels(),
            page_size=page_size,
        )


def sort_newest_first(df: pd.DataFrame) -> pd.DataFrame:
    """Order transactions by date descending, undated rows last."""

    return df.sort_values("date", ascending=False, kind="stable", na_position="last")


def filter_by_category(df: pd.DataFrame, category: str | None) -> pd.DataFrame:
    if category is None or category == ALL_CATEGORIES:
        return df
    return df.loc[df["category"] == category]


@dataclass(eq=False)
class TransactionListView:
    """Category-filtered, newest-first, paged view of a transaction collection.

    Selecting a category always returns to the first page, so a page number
    from a larger result set never points past the end of a smaller one.
    """

    transactions: Iterable[Mapping[str, Any]] | pd.DataFrame
    page_size: int = DEFAULT_TRANSACTION_PAGE_SIZE
    category: str | None = None
    page: int = 1
    _frame: pd.DataFrame = field(init=False, repr=False)

    def __post_init__(self) -> None:
        _check_page_size(self.page_size)
        self._frame = sort_newest_first(features.normalize_transactions(self.transactions))

    def select_category(self, category: str | None) -> None:
        self.category = category
        self.page = 1

    def go_to(self, page: int) -> pd.DataFrame:
        self.page = page
        return self.current

    @property
    def filtered(self) -> pd.DataFrame:
        return filter_by_category(self._frame, self.category)

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered), self.page_size)

    @property
    def current(self) -> pd.DataFrame:
        return paginate(self.filtered, self.page, self.page_size)
