import logging
from typing import Dict, Mapping, Optional, Sequence

from comparison import compare_universities
from database import find_universities, get_universities_by_ids
from filters import compile_filters
from gemini_client import generate_comparison_explanation
from pipeline import run_pipeline

logger = logging.getLogger(__name__)


class ComparisonError(Exception):
    """Comparison could not be produced for the requested ids."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def search_universities(
    params: Mapping[str, str],
    default_limit: Optional[int] = None,
    current_year: Optional[int] = None,
) -> Dict:
    """
    Run a search: compile parameters, fetch matches, apply the post-fetch pipeline.

    Args:
        params: Query parameters as strings (all optional)
        default_limit: Page size when no limit is given
        current_year: Year used for institution age filters

    Returns:
        Envelope with data, pagination and filters.
        A failed fetch yields an empty page, not an error.
    """
    query = compile_filters(params, default_limit=default_limit, current_year=current_year)
    universities = find_universities(query.predicate)
    result = run_pipeline(universities, query)

    logger.info(
        f"[LOGIC] Search matched {result['pagination']['total']} universities, "
        f"returning page {query.page}/{result['pagination']['totalPages']}"
    )
    return result


def compare_by_ids(
    university_ids: Sequence[str],
    explain: bool = False,
    current_year: Optional[int] = None,
) -> Dict:
    """
    Compare two universities by id.

    Raises:
        ComparisonError: 400 unless exactly two distinct ids, 404 if an id is unknown
    """
    ids = [uid.strip() for uid in university_ids if uid and uid.strip()]
    if len(ids) != 2:
        raise ComparisonError("Exactly two university ids are required for a comparison")
    if ids[0] == ids[1]:
        raise ComparisonError("Cannot compare a university with itself")

    universities = get_universities_by_ids(ids)
    if len(universities) != 2:
        missing = [uid for uid in ids if uid not in {uni["_id"] for uni in universities}]
        raise ComparisonError(f"University not found: {', '.join(missing)}", status_code=404)

    comparison = compare_universities(universities, current_year=current_year)
    comparison["explanation"] = comparison["summary"]

    if explain:
        try:
            comparison["explanation"] = generate_comparison_explanation(comparison)
        except Exception as e:
            logger.warning(f"AI explanation unavailable, using summary: {str(e)}")

    return comparison
