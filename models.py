from sqlalchemy import Column, Integer, String, Float
from sqlalchemy.orm import declarative_base
import enum

from config import settings

Base = declarative_base()

# Enums
class AffordabilityTier(str, enum.Enum):
    BUDGET = "budget"
    MODERATE = "moderate"
    PREMIUM = "premium"
    LUXURY = "luxury"

class AgeCategory(str, enum.Enum):
    MODERN = "modern"
    ESTABLISHED = "established"
    HISTORIC = "historic"
    ANCIENT = "ancient"

class SortKey(str, enum.Enum):
    RANKING = "ranking"
    TUITION_FEE = "tuitionFee"
    UNIVERSITY_NAME = "universityName"
    ESTABLISHED_YEAR = "establishedYear"
    COUNTRY = "country"
    LOCATION = "location"
    VALUE_SCORE = "valueScore"

class Verdict(str, enum.Enum):
    FIRST = "first"
    SECOND = "second"
    EQUAL = "equal"

# Models
class University(Base):
    """University document. Column names match the document field names."""
    __tablename__ = settings.UNIVERSITY_TABLE

    id = Column("_id", String(64), primary_key=True)
    university_name = Column("universityName", String(255), nullable=False, index=True)
    country = Column(String(100), index=True)
    location = Column(String(255))
    tuition_fee = Column("tuitionFee", Float, nullable=False, default=0)
    ranking = Column(Integer)
    established_year = Column("establishedYear", Integer)
