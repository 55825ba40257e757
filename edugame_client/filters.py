from __future__ import annotations

from enum import Enum
from typing import Optional

import httpx


class SortKey(str, Enum):
    CREATED_AT = "orderByCreatedAt"
    LIKE_AMOUNT = "orderByLikeAmount"
    PLAY_AMOUNT = "orderByPlayAmount"
    NAME = "orderByName"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ListFilterQueryBuilder:
    """Sort/filter state for the game list.

    At most one sort key is active at a time. The type filter and the search
    term are independent of the sort and of each other.
    """

    def __init__(
        self,
        *,
        sort: Optional[tuple[SortKey, SortDirection]] = (SortKey.CREATED_AT, SortDirection.DESC),
        game_type_slug: Optional[str] = None,
        search: str = "",
    ) -> None:
        self._sort = sort
        self.game_type_slug = game_type_slug
        self._search = ""
        self.set_search(search)

    @property
    def sort(self) -> Optional[tuple[SortKey, SortDirection]]:
        return self._sort

    @property
    def search(self) -> str:
        return self._search

    def direction_for(self, key: SortKey) -> Optional[SortDirection]:
        if self._sort and self._sort[0] == key:
            return self._sort[1]
        return None

    def select_sort(self, key: SortKey, direction: SortDirection) -> None:
        # picking the active option again turns sorting off
        if self._sort == (key, direction):
            self._sort = None
        else:
            self._sort = (SortKey(key), SortDirection(direction))

    def clear_sort(self) -> None:
        self._sort = None

    def set_game_type(self, slug: Optional[str]) -> None:
        self.game_type_slug = slug or None

    def toggle_game_type(self, slug: str) -> None:
        self.game_type_slug = None if self.game_type_slug == slug else slug

    def set_search(self, term: Optional[str]) -> None:
        self._search = (term or "").strip()

    def to_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self._search:
            params.append(("search", self._search))
        for key in SortKey:
            direction = self.direction_for(key)
            if direction:
                params.append((key.value, direction.value))
        if self.game_type_slug:
            params.append(("gameTypeSlug", self.game_type_slug))
        return params

    def to_query_string(self) -> str:
        return str(httpx.QueryParams(self.to_params()))
