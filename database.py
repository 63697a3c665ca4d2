from functools import lru_cache
from typing import Any, Dict, List, Sequence

from sqlalchemy import create_engine, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from config import settings
from models import University
import logging

# Configure logger
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

universities_table = University.__table__

# Document field -> column. Only these fields may appear in a predicate.
FIELD_COLUMNS = {column.name: column for column in universities_table.columns}

LIKE_ESCAPE = "\\"

@lru_cache(maxsize=4)
def _engine_for(url: str) -> Engine:
    return create_engine(url)

def get_db_connection() -> Engine:
    """Return the (cached) database engine."""
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL environment variable not set")
    return _engine_for(settings.DATABASE_URL)

def verify_tables_exist() -> bool:
    """Check the universities table is present. Logs instead of raising."""
    try:
        engine = get_db_connection()
        existing_tables = inspect(engine).get_table_names()
    except (ValueError, SQLAlchemyError) as e:
        logger.error(f"Could not inspect database: {str(e)}")
        return False

    if settings.UNIVERSITY_TABLE not in existing_tables:
        logger.warning(f"Table '{settings.UNIVERSITY_TABLE}' is missing. Run migrate.py to create it.")
        return False
    return True

def _escape_like(text: str) -> str:
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )

def build_conditions(predicate: Dict[str, Any]) -> list:
    """
    Translate a document predicate into SQLAlchemy clauses (AND-ed).

    Supported shapes per field:
        {"field": value}                   equality
        {"field": {"$in": [...]}}          set membership
        {"field": {"$gte": x, "$lte": y}}  inclusive range
        {"field": {"$icontains": "text"}}  case-insensitive substring

    Raises ValueError for unknown fields or operators.
    """
    conditions = []
    for field, spec in predicate.items():
        column = FIELD_COLUMNS.get(field)
        if column is None:
            raise ValueError(f"Unknown university field in predicate: {field}")

        if not isinstance(spec, dict):
            conditions.append(column == spec)
            continue

        for operator, value in spec.items():
            if operator == "$in":
                conditions.append(column.in_(list(value)))
            elif operator == "$gte":
                conditions.append(column >= value)
            elif operator == "$lte":
                conditions.append(column <= value)
            elif operator == "$icontains":
                conditions.append(column.ilike(f"%{_escape_like(value)}%", escape=LIKE_ESCAPE))
            else:
                raise ValueError(f"Unsupported predicate operator for {field}: {operator}")
    return conditions

def find_universities(predicate: Dict[str, Any]) -> List[Dict]:
    """
    Fetch every university document matching the predicate.

    FAILSAFE: database errors are logged and an empty list is returned,
    never a partial result.
    """
    conditions = build_conditions(predicate)
    query = select(universities_table).where(*conditions)

    try:
        engine = get_db_connection()
        with engine.connect() as conn:
            result = conn.execute(query)
            universities = [dict(row._mapping) for row in result]
    except (ValueError, SQLAlchemyError) as e:
        logger.error(f"Database query failed: {str(e)}")
        return []

    logger.info(f"Query: predicate={predicate}, found={len(universities)}")
    return universities

def get_universities_by_ids(university_ids: Sequence[str]) -> List[Dict]:
    """Fetch universities by id, in the order the ids were given. Unknown ids are skipped."""
    if not university_ids:
        return []

    found = find_universities({"_id": {"$in": list(university_ids)}})
    by_id = {uni["_id"]: uni for uni in found}
    universities = [by_id[uid] for uid in university_ids if uid in by_id]

    logger.info(f"Query (ID mode): ids={list(university_ids)}, found={len(universities)}")
    return universities
