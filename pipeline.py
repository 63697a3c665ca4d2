"""
Post-fetch result pipeline.

filter -> value ranking -> explicit sort -> paginate. Every step returns a new
list and never mutates the fetched documents.
"""

import math
from typing import Any, Callable, Dict, List, Sequence

from filters import CompiledQuery, PostFilter
from models import SortKey
from scoring import record_value_score

def _field(name: str) -> Callable[[Dict], Any]:
    return lambda university: university.get(name)

def _value_score(university: Dict) -> float:
    if "valueScore" in university:
        return university["valueScore"]
    return record_value_score(university)

SORT_FIELDS: Dict[SortKey, Callable[[Dict], Any]] = {
    SortKey.RANKING: _field("ranking"),
    SortKey.TUITION_FEE: _field("tuitionFee"),
    SortKey.UNIVERSITY_NAME: _field("universityName"),
    SortKey.ESTABLISHED_YEAR: _field("establishedYear"),
    SortKey.COUNTRY: _field("country"),
    SortKey.LOCATION: _field("location"),
    SortKey.VALUE_SCORE: _value_score,
}

def apply_post_filters(universities: Sequence[Dict], post_filters: Sequence[PostFilter]) -> List[Dict]:
    """Keep universities passing every post-fetch filter."""
    return [uni for uni in universities if all(keep(uni) for keep in post_filters)]

def rank_by_value(universities: Sequence[Dict]) -> List[Dict]:
    """Attach valueScore to copies of each university and sort best value first."""
    scored = [{**uni, "valueScore": record_value_score(uni)} for uni in universities]
    # sorted() is stable, ties keep their fetched order
    return sorted(scored, key=lambda uni: uni["valueScore"], reverse=True)

def sort_universities(universities: Sequence[Dict], sort_key: SortKey, descending: bool = False) -> List[Dict]:
    """
    Stable sort on one of the allowed keys.

    Universities missing the sort value keep their relative order and go last
    in either direction.
    """
    extract = SORT_FIELDS[sort_key]
    present = [uni for uni in universities if extract(uni) is not None]
    missing = [uni for uni in universities if extract(uni) is None]
    return sorted(present, key=extract, reverse=descending) + missing

def paginate(universities: Sequence[Dict], page: int, limit: int) -> List[Dict]:
    start = (page - 1) * limit
    return list(universities[start:start + limit])

def run_pipeline(universities: Sequence[Dict], query: CompiledQuery) -> Dict:
    """
    Run the post-fetch steps and build the response envelope.

    Returns:
        {
            "data": [...],
            "pagination": {"total", "page", "limit", "totalPages"},
            "filters": {"applied", "count"}
        }
    """
    results = apply_post_filters(universities, query.post_filters)

    if query.value_for_money:
        results = rank_by_value(results)

    # An explicit sort replaces the value order
    if query.sort_key is not None:
        results = sort_universities(results, query.sort_key, query.descending)

    total = len(results)
    applied = bool(query.predicate) or query.post_filter_requested or query.value_for_money

    return {
        "data": paginate(results, query.page, query.limit),
        "pagination": {
            "total": total,
            "page": query.page,
            "limit": query.limit,
            "totalPages": math.ceil(total / query.limit),
        },
        "filters": {
            "applied": applied,
            "count": total,
        },
    }
