import copy

import pytest
from sqlalchemy import insert

import database
from config import settings
from models import Base

SAMPLE_UNIVERSITIES = [
    {"_id": "u1", "universityName": "Harvard University", "country": "USA", "location": "Cambridge, MA",
     "tuitionFee": 54000, "ranking": 4, "establishedYear": 1636},
    {"_id": "u2", "universityName": "University of Oxford", "country": "UK", "location": "Oxford",
     "tuitionFee": 39000, "ranking": 1, "establishedYear": 1096},
    {"_id": "u3", "universityName": "Technical University of Munich", "country": "Germany", "location": "Munich",
     "tuitionFee": 3000, "ranking": 30, "establishedYear": 1868},
    {"_id": "u4", "universityName": "University of Toronto", "country": "Canada", "location": "Toronto",
     "tuitionFee": 45000, "ranking": 21, "establishedYear": 1827},
    {"_id": "u5", "universityName": "University of Tokyo", "country": "Japan", "location": "Tokyo",
     "tuitionFee": 5000, "ranking": 28, "establishedYear": 1877},
    {"_id": "u6", "universityName": "University College London", "country": "UK", "location": "London",
     "tuitionFee": 31000, "ranking": 9, "establishedYear": 1826},
    {"_id": "u7", "universityName": "Massachusetts Institute of Technology", "country": "USA", "location": "Cambridge, MA",
     "tuitionFee": 57000, "ranking": 2, "establishedYear": 1861},
    {"_id": "u8", "universityName": "National University of Singapore", "country": "Singapore", "location": "Singapore",
     "tuitionFee": 20000, "ranking": 8, "establishedYear": 1905},
    {"_id": "u9", "universityName": "Sorbonne University", "country": "France", "location": "Paris",
     "tuitionFee": 3500, "ranking": 72, "establishedYear": 1257},
    {"_id": "u10", "universityName": "Bay State Community College", "country": "USA", "location": "Boston, MA",
     "tuitionFee": 12000, "ranking": 0, "establishedYear": 2001},
]


@pytest.fixture
def sample_universities():
    return copy.deepcopy(SAMPLE_UNIVERSITIES)


@pytest.fixture
def db_engine(tmp_path, monkeypatch):
    """Empty SQLite database with the universities table."""
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{tmp_path / 'universities.db'}")
    engine = database.get_db_connection()
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded_db(db_engine, sample_universities):
    with db_engine.begin() as conn:
        conn.execute(insert(database.universities_table), sample_universities)
    return db_engine
