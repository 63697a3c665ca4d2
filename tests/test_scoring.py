import pytest

from models import AffordabilityTier, AgeCategory
from scoring import affordability_tier, age_category, institution_age, record_value_score, value_score


@pytest.mark.parametrize("tuition, tier", [
    (0, AffordabilityTier.BUDGET),
    (9999, AffordabilityTier.BUDGET),
    (10000, AffordabilityTier.MODERATE),
    (24999, AffordabilityTier.MODERATE),
    (25000, AffordabilityTier.PREMIUM),
    (49999, AffordabilityTier.PREMIUM),
    (50000, AffordabilityTier.LUXURY),
    (250000, AffordabilityTier.LUXURY),
])
def test_affordability_tier_boundaries(tuition, tier):
    assert affordability_tier(tuition) == tier


@pytest.mark.parametrize("year, category", [
    (1975, AgeCategory.MODERN),       # 49 years
    (1974, AgeCategory.ESTABLISHED),  # 50
    (1925, AgeCategory.ESTABLISHED),  # 99
    (1924, AgeCategory.HISTORIC),     # 100
    (1825, AgeCategory.HISTORIC),     # 199
    (1824, AgeCategory.ANCIENT),      # 200
    (1096, AgeCategory.ANCIENT),
])
def test_age_category_boundaries(year, category):
    assert age_category(year, current_year=2024) == category


def test_future_founding_year_gives_negative_age_and_modern():
    assert institution_age(2030, current_year=2024) == -6
    assert age_category(2030, current_year=2024) == AgeCategory.MODERN


def test_institution_age_defaults_to_this_year():
    from datetime import date
    assert institution_age(2000) == date.today().year - 2000


def test_value_score_examples():
    assert value_score(500, 10000) == 50
    assert value_score(10, 50000) == pytest.approx(19.8)
    assert value_score(50, 20000) == pytest.approx(47.5)


@pytest.mark.parametrize("ranking", [0, -3, None])
def test_unranked_value_score_is_zero(ranking):
    assert value_score(ranking, 12345) == 0


def test_free_tuition_value_score_is_zero():
    assert value_score(10, 0) == 0


def test_record_value_score_reads_document_fields():
    assert record_value_score({"ranking": 500, "tuitionFee": 10000}) == 50
