from typing import Dict, List, Optional, Sequence

from models import Verdict
from scoring import (
    affordability_tier,
    age_category,
    institution_age,
    record_value_score,
    resolve_year,
)

# Advantage labels, in display order
ADVANTAGE_LABELS = [
    ("ranking", "Better world ranking"),
    ("tuition", "More affordable"),
    ("value", "Better value for money"),
    ("age", "Longer history"),
]
NO_ADVANTAGES = "No advantages"

def better_value(first: float, second: float, lower_is_better: bool = False) -> Verdict:
    """Three-way verdict between two metric values."""
    if first == second:
        return Verdict.EQUAL
    if lower_is_better:
        return Verdict.FIRST if first < second else Verdict.SECOND
    return Verdict.FIRST if first > second else Verdict.SECOND

def ranking_verdict(first: Optional[int], second: Optional[int]) -> Verdict:
    """Lower ranking wins. A missing ranking counts as unranked and loses to any ranked university."""
    if first is None and second is None:
        return Verdict.EQUAL
    if first is None:
        return Verdict.SECOND
    if second is None:
        return Verdict.FIRST
    return better_value(first, second, lower_is_better=True)

def age_verdict(first: Optional[int], second: Optional[int]) -> Verdict:
    """Older wins. No verdict (equal) when either founding year is unknown."""
    if first is None or second is None:
        return Verdict.EQUAL
    return better_value(first, second)

def university_profile(university: Dict, current_year: int) -> Dict:
    """Derived figures shown next to each compared university. Age fields are None without a founding year."""
    established = university.get("establishedYear")
    known = established is not None
    return {
        **university,
        "age": institution_age(established, current_year) if known else None,
        "ageCategory": age_category(established, current_year).value if known else None,
        "affordabilityTier": affordability_tier(university["tuitionFee"]).value,
        "valueScore": round(record_value_score(university), 2),
    }

def cost_difference(first: Dict, second: Dict) -> Dict:
    """Absolute tuition gap and which side is cheaper."""
    fee1, fee2 = first["tuitionFee"], second["tuitionFee"]
    if fee1 < fee2:
        statement = f"{first['universityName']} is cheaper"
    elif fee1 > fee2:
        statement = f"{second['universityName']} is cheaper"
    else:
        statement = "Same cost"
    return {"amount": abs(fee1 - fee2), "statement": statement}

def advantages_for(verdicts: Dict[str, Verdict], position: Verdict) -> List[str]:
    advantages = [label for metric, label in ADVANTAGE_LABELS if verdicts[metric] == position]
    return advantages or [NO_ADVANTAGES]

def build_summary(profiles: List[Dict], advantages: Dict[str, List[str]], cost: Dict) -> str:
    """Plain-text summary of a comparison."""
    lines = []
    for profile, position in zip(profiles, (Verdict.FIRST, Verdict.SECOND)):
        lines.append(f"{profile['universityName']}: {', '.join(advantages[position.value])}.")
    if cost["amount"]:
        lines.append(f"{cost['statement']} by ${cost['amount']:,.0f} per year.")
    else:
        lines.append("Both charge the same tuition.")
    return " ".join(lines)

def compare_universities(
    universities: Sequence[Dict],
    current_year: Optional[int] = None,
) -> Optional[Dict]:
    """
    Compare exactly two universities across ranking, tuition, age and value.

    Args:
        universities: The two university documents, in display order
        current_year: Year used for ages (defaults to this year)

    Returns:
        Dict with keys: universities, verdicts, advantages, costDifference, summary.
        None when not given exactly two universities.
    """
    if len(universities) != 2:
        return None

    year = resolve_year(current_year)
    profiles = [university_profile(uni, year) for uni in universities]
    first, second = profiles

    verdicts = {
        "ranking": ranking_verdict(first.get("ranking"), second.get("ranking")),
        "tuition": better_value(first["tuitionFee"], second["tuitionFee"], lower_is_better=True),
        "age": age_verdict(first["age"], second["age"]),
        "value": better_value(first["valueScore"], second["valueScore"]),
    }
    advantages = {
        Verdict.FIRST.value: advantages_for(verdicts, Verdict.FIRST),
        Verdict.SECOND.value: advantages_for(verdicts, Verdict.SECOND),
    }
    cost = cost_difference(first, second)

    return {
        "universities": profiles,
        "verdicts": {metric: verdict.value for metric, verdict in verdicts.items()},
        "advantages": advantages,
        "costDifference": cost,
        "summary": build_summary(profiles, advantages, cost),
    }
