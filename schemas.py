"""
Pydantic schemas for API responses.

Field names are snake_case; the wire format uses the camelCase document
field names through aliases.
"""

from pydantic import BaseModel, Field
from typing import List, Optional

# University Schemas
class UniversityResponse(BaseModel):
    id: str = Field(alias="_id")
    university_name: str = Field(alias="universityName")
    country: Optional[str] = None
    location: Optional[str] = None
    tuition_fee: float = Field(0, alias="tuitionFee")
    ranking: Optional[int] = None
    established_year: Optional[int] = Field(None, alias="establishedYear")
    value_score: Optional[float] = Field(None, alias="valueScore")  # Only set for value-for-money searches

    class Config:
        populate_by_name = True

# Search Schemas
class Pagination(BaseModel):
    total: int = 0
    page: int = 1
    limit: int = 50
    total_pages: int = Field(0, alias="totalPages")

    class Config:
        populate_by_name = True

class FiltersSummary(BaseModel):
    applied: bool = False
    count: int = 0

class SearchResponse(BaseModel):
    data: List[UniversityResponse] = []
    pagination: Pagination = Field(default_factory=Pagination)
    filters: FiltersSummary = Field(default_factory=FiltersSummary)

# Comparison Schemas
class ComparedUniversity(UniversityResponse):
    age: Optional[int] = None  # None without a founding year
    age_category: Optional[str] = Field(None, alias="ageCategory")
    affordability_tier: str = Field(alias="affordabilityTier")
    value_score: float = Field(alias="valueScore")

class Verdicts(BaseModel):
    ranking: str
    tuition: str
    age: str
    value: str

class Advantages(BaseModel):
    first: List[str] = []
    second: List[str] = []

class CostDifference(BaseModel):
    amount: float
    statement: str

class ComparisonResponse(BaseModel):
    universities: List[ComparedUniversity]
    verdicts: Verdicts
    advantages: Advantages
    cost_difference: CostDifference = Field(alias="costDifference")
    summary: str
    explanation: str

    class Config:
        populate_by_name = True

# Error Schema
class ErrorResponse(BaseModel):
    status: str = "ERROR"
    error: str
    message: str
