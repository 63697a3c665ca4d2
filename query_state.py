"""
Immutable search form state for clients of the /api endpoint.

A state never changes in place: every edit produces a new QueryState, and the
query string is built from it by a pure function.
"""

from pydantic import BaseModel
from typing import Dict, Optional, Tuple

from models import SortKey

CLIENT_PAGE_LIMIT = 20


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


class QueryState(BaseModel):
    search: str = ""
    countries: str = ""
    region: str = ""
    location: str = ""
    min_tuition: Optional[float] = None
    max_tuition: Optional[float] = None
    min_ranking: Optional[int] = None
    max_ranking: Optional[int] = None
    affordability: Tuple[str, ...] = ()
    top_tier: Optional[int] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    institution_age: Tuple[str, ...] = ()
    value_for_money: bool = False
    sort_by: Optional[SortKey] = SortKey.RANKING
    sort_order: str = "asc"
    page: int = 1
    limit: int = CLIENT_PAGE_LIMIT

    class Config:
        frozen = True

    def with_changes(self, **changes) -> "QueryState":
        """New state with the given fields replaced. Back to page 1 unless page is changed."""
        changes.setdefault("page", 1)
        return QueryState(**{**self.model_dump(), **changes})

    def toggle(self, field: str, value: str) -> "QueryState":
        """Add or remove a value from affordability or institution_age."""
        if field not in ("affordability", "institution_age"):
            raise ValueError(f"Cannot toggle field: {field}")
        current = getattr(self, field)
        updated = tuple(v for v in current if v != value) if value in current else current + (value,)
        return self.with_changes(**{field: updated})

    def reset(self) -> "QueryState":
        return QueryState()

    def search_changed(self, previous: "QueryState") -> bool:
        return self.search != previous.search

    def to_params(self) -> Dict[str, str]:
        """Query parameters for this state. Empty values are left out; page and limit always go."""
        params: Dict[str, str] = {}

        text_fields = [
            ("search", self.search),
            ("countries", self.countries),
            ("region", self.region),
            ("location", self.location),
        ]
        for name, value in text_fields:
            if value:
                params[name] = value

        number_fields = [
            ("minTuition", self.min_tuition),
            ("maxTuition", self.max_tuition),
            ("minRanking", self.min_ranking),
            ("maxRanking", self.max_ranking),
            ("topTier", self.top_tier),
            ("minYear", self.min_year),
            ("maxYear", self.max_year),
        ]
        for name, value in number_fields:
            if value is not None:
                params[name] = _number(value)

        if self.affordability:
            params["affordability"] = ",".join(self.affordability)
        if self.institution_age:
            params["institutionAge"] = ",".join(self.institution_age)
        if self.value_for_money:
            params["valueForMoney"] = "true"
        if self.sort_by:
            params["sortBy"] = self.sort_by.value
        if self.sort_order:
            params["sortOrder"] = self.sort_order

        params["page"] = str(self.page)
        params["limit"] = str(self.limit)
        return params
