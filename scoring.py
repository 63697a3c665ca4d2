"""
Derived university attributes: affordability tier, institution age and value score.
"""

from datetime import date
from typing import Dict, Optional

from models import AffordabilityTier, AgeCategory

def resolve_year(current_year: Optional[int] = None) -> int:
    """Return current_year, or this calendar year when not given."""
    return current_year if current_year is not None else date.today().year

def affordability_tier(tuition_fee: float) -> AffordabilityTier:
    """
    Bucket an annual tuition fee.

    Intervals are half-open and inclusive on the low side:
    budget < 10,000 <= moderate < 25,000 <= premium < 50,000 <= luxury
    """
    if tuition_fee < 10000:
        return AffordabilityTier.BUDGET
    elif tuition_fee < 25000:
        return AffordabilityTier.MODERATE
    elif tuition_fee < 50000:
        return AffordabilityTier.PREMIUM
    else:
        return AffordabilityTier.LUXURY

def institution_age(established_year: int, current_year: Optional[int] = None) -> int:
    """Age in years. Not validated, a future founding year gives a negative age."""
    return resolve_year(current_year) - established_year

def age_category(established_year: int, current_year: Optional[int] = None) -> AgeCategory:
    """
    Bucket an institution by age.

    modern < 50 <= established < 100 <= historic < 200 <= ancient
    """
    age = institution_age(established_year, current_year)
    if age < 50:
        return AgeCategory.MODERN
    elif age < 100:
        return AgeCategory.ESTABLISHED
    elif age < 200:
        return AgeCategory.HISTORIC
    else:
        return AgeCategory.ANCIENT

def value_score(ranking: Optional[int], tuition_fee: Optional[float]) -> float:
    """
    Ranking-per-cost metric: (1000 - ranking) / (tuition_fee / 1000).

    Unranked universities (ranking <= 0 or missing) score 0. A non-positive
    tuition fee has no defined ratio and also scores 0.
    """
    if not ranking or ranking <= 0:
        return 0.0
    if not tuition_fee or tuition_fee <= 0:
        return 0.0
    return (1000 - ranking) / (tuition_fee / 1000)

def record_value_score(university: Dict) -> float:
    """Value score of a university document."""
    return value_score(university.get("ranking"), university.get("tuitionFee"))
