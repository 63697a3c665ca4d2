"""
Query filter compiler.

Turns the flat URL parameters of the search endpoint into a database
predicate plus the post-fetch steps that depend on derived attributes.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from config import settings
from models import AffordabilityTier, AgeCategory, SortKey
from scoring import affordability_tier, age_category

logger = logging.getLogger(__name__)

PostFilter = Callable[[Dict], bool]

# Regional grouping for study abroad students
REGIONAL_GROUPS: Dict[str, List[str]] = {
    "north-america": ["USA", "Canada", "Mexico"],
    "europe": [
        "UK", "Germany", "France", "Spain", "Italy", "Netherlands", "Sweden", "Switzerland",
        "Ireland", "Belgium", "Austria", "Denmark", "Norway", "Finland", "Poland",
    ],
    "asia-pacific": [
        "Australia", "New Zealand", "Japan", "South Korea", "Singapore", "China",
        "Hong Kong", "Taiwan", "Malaysia", "Thailand",
    ],
    "middle-east": ["UAE", "Saudi Arabia", "Qatar", "Israel", "Turkey"],
    "latin-america": ["Brazil", "Argentina", "Chile", "Colombia"],
    "africa": ["South Africa", "Egypt", "Kenya", "Nigeria"],
}

# Country normalization mapping (keys lower-cased)
COUNTRY_ALIASES = {
    "us": "USA",
    "u.s.": "USA",
    "united states": "USA",
    "united states of america": "USA",
    "uk": "UK",
    "u.k.": "UK",
    "united kingdom": "UK",
    "great britain": "UK",
    "korea": "South Korea",
    "republic of korea": "South Korea",
    "united arab emirates": "UAE",
    "holland": "Netherlands",
}


class InvalidQueryError(ValueError):
    """A query parameter was present but cannot be honoured."""


@dataclass(frozen=True)
class CompiledQuery:
    predicate: Dict[str, Any] = field(default_factory=dict)
    post_filters: List[PostFilter] = field(default_factory=list)
    post_filter_requested: bool = False
    value_for_money: bool = False
    sort_key: Optional[SortKey] = None
    descending: bool = False
    page: int = 1
    limit: int = 50


def normalize_country(country: str) -> str:
    """Map common country spellings to the names stored in the collection."""
    name = country.strip()
    return COUNTRY_ALIASES.get(name.lower(), name)

def split_list(value: Optional[str], lower: bool = False) -> List[str]:
    """Comma-split a parameter, trimming items and dropping empty ones."""
    if not value:
        return []
    items = [item.strip() for item in value.split(",")]
    if lower:
        items = [item.lower() for item in items]
    return [item for item in items if item]

def parse_float(value: Optional[str]) -> Optional[float]:
    """Parse a float parameter. Missing or unparsable values give None."""
    if value is None or not value.strip():
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None

def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer parameter, truncating decimals ("10.7" -> 10)."""
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        number = parse_float(value)
        return int(number) if number is not None else None

def _range(min_value, max_value) -> Optional[Dict[str, Any]]:
    bounds = {}
    if min_value is not None:
        bounds["$gte"] = min_value
    if max_value is not None:
        bounds["$lte"] = max_value
    return bounds or None

def _tier_filter(tiers: List[str]) -> PostFilter:
    wanted = set(tiers)
    def keep(university: Dict) -> bool:
        return affordability_tier(university.get("tuitionFee") or 0).value in wanted
    return keep

def _age_filter(categories: List[str], current_year: Optional[int]) -> PostFilter:
    wanted = set(categories)
    def keep(university: Dict) -> bool:
        year = university.get("establishedYear")
        if year is None:
            return False
        return age_category(year, current_year).value in wanted
    return keep

def parse_sort_key(value: Optional[str]) -> Optional[SortKey]:
    """Resolve sortBy against the allowed keys. Unknown keys are rejected."""
    if not value or not value.strip():
        return None
    try:
        return SortKey(value.strip())
    except ValueError:
        allowed = ", ".join(key.value for key in SortKey)
        raise InvalidQueryError(f"Unsupported sortBy '{value}'. Allowed: {allowed}")

def compile_filters(
    params: Mapping[str, str],
    default_limit: Optional[int] = None,
    current_year: Optional[int] = None,
) -> CompiledQuery:
    """
    Compile search parameters into a CompiledQuery.

    Evaluation order decides precedence:
    - topTier is applied after minRanking/maxRanking and replaces them.
    - region is applied after countries and replaces them.

    Malformed numbers are ignored. Only an unknown sortBy raises
    InvalidQueryError.
    """
    predicate: Dict[str, Any] = {}

    # BASIC FILTERS
    countries = [normalize_country(c) for c in split_list(params.get("countries"))]
    if countries:
        predicate["country"] = {"$in": countries}

    location = (params.get("location") or "").strip()
    if location:
        predicate["location"] = {"$icontains": location}

    search = (params.get("search") or "").strip()
    if search:
        predicate["universityName"] = {"$icontains": search}

    # RANGE FILTERS
    tuition = _range(parse_float(params.get("minTuition")), parse_float(params.get("maxTuition")))
    if tuition:
        predicate["tuitionFee"] = tuition

    ranking = _range(parse_int(params.get("minRanking")), parse_int(params.get("maxRanking")))
    if ranking:
        predicate["ranking"] = ranking

    top_tier = parse_int(params.get("topTier"))
    if top_tier is not None:
        if "ranking" in predicate:
            logger.info(f"[LOGIC] topTier={top_tier} replaces ranking range {predicate['ranking']}")
        predicate["ranking"] = {"$lte": top_tier}

    years = _range(parse_int(params.get("minYear")), parse_int(params.get("maxYear")))
    if years:
        predicate["establishedYear"] = years

    region = (params.get("region") or "").strip()
    if region in REGIONAL_GROUPS:
        if "country" in predicate:
            logger.info(f"[LOGIC] region={region} replaces country filter {predicate['country']}")
        predicate["country"] = {"$in": list(REGIONAL_GROUPS[region])}
    elif region:
        logger.debug(f"Ignoring unknown region: {region}")

    # POST-FETCH FILTERS
    post_filters: List[PostFilter] = []

    tiers = split_list(params.get("affordability"), lower=True)
    if tiers:
        unknown = set(tiers) - {tier.value for tier in AffordabilityTier}
        if unknown:
            logger.debug(f"Affordability tiers with no match: {sorted(unknown)}")
        post_filters.append(_tier_filter(tiers))

    ages = split_list(params.get("institutionAge"), lower=True)
    if ages:
        unknown = set(ages) - {category.value for category in AgeCategory}
        if unknown:
            logger.debug(f"Age categories with no match: {sorted(unknown)}")
        post_filters.append(_age_filter(ages, current_year))

    value_for_money = (params.get("valueForMoney") or "").strip().lower() == "true"

    # SORTING
    sort_key = parse_sort_key(params.get("sortBy"))
    descending = (params.get("sortOrder") or "").strip().lower() == "desc"

    # PAGINATION
    fallback_limit = default_limit or settings.DEFAULT_PAGE_LIMIT
    page = parse_int(params.get("page"))
    if page is None or page < 1:
        page = 1
    limit = parse_int(params.get("limit"))
    if limit is None or limit < 1:
        limit = fallback_limit
    limit = min(limit, settings.MAX_PAGE_LIMIT)

    return CompiledQuery(
        predicate=predicate,
        post_filters=post_filters,
        post_filter_requested=bool(tiers or ages),
        value_for_money=value_for_money,
        sort_key=sort_key,
        descending=descending,
        page=page,
        limit=limit,
    )
