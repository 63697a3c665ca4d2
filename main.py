from fastapi import FastAPI, Query, Request
from typing import Optional
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import logging

from config import settings
import schemas
from database import verify_tables_exist
from filters import InvalidQueryError
from service import ComparisonError, compare_by_ids, search_universities

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(title="University Explorer Backend")

# Check the universities table on startup
@app.on_event("startup")
def startup_event():
    settings.validate()
    verify_tables_exist()

# Global Custom Error Handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Convert 422 to 400 for frontend compatibility."""
    return JSONResponse(
        status_code=400,
        content={"error": "VALIDATION_ERROR", "message": f"Invalid data format: {str(exc)}"},
    )

@app.exception_handler(InvalidQueryError)
async def invalid_query_handler(request: Request, exc: InvalidQueryError):
    """Rejected query parameters (e.g. an unsupported sortBy)."""
    return JSONResponse(
        status_code=400,
        content={"error": "VALIDATION_ERROR", "message": str(exc)},
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions."""
    logger.exception(f"Global Error: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_SERVER_ERROR", "message": "An unexpected error occurred. Please try again."},
    )

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# ============================================
# ENDPOINTS
# ============================================

@app.get("/")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "university-explorer-backend"}

@app.get(
    "/api",
    response_model=schemas.SearchResponse,
    response_model_exclude_none=True,
    responses={400: {"model": schemas.ErrorResponse}},
)
def search(
    countries: Optional[str] = Query(None, description="Comma-separated country names"),
    location: Optional[str] = Query(None, description="Case-insensitive substring of the location"),
    search: Optional[str] = Query(None, description="Case-insensitive substring of the university name"),
    min_tuition: Optional[str] = Query(None, alias="minTuition"),
    max_tuition: Optional[str] = Query(None, alias="maxTuition"),
    min_ranking: Optional[str] = Query(None, alias="minRanking"),
    max_ranking: Optional[str] = Query(None, alias="maxRanking"),
    top_tier: Optional[str] = Query(None, alias="topTier", description="Ranking <= N, replaces minRanking/maxRanking"),
    min_year: Optional[str] = Query(None, alias="minYear"),
    max_year: Optional[str] = Query(None, alias="maxYear"),
    region: Optional[str] = Query(None, description="Regional group key, replaces countries"),
    affordability: Optional[str] = Query(None, description="Comma-separated: budget, moderate, premium, luxury"),
    institution_age: Optional[str] = Query(None, alias="institutionAge", description="Comma-separated: modern, established, historic, ancient"),
    value_for_money: Optional[str] = Query(None, alias="valueForMoney"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc (default) or desc"),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
):
    """
    Search universities.

    Every parameter is optional and taken as a string. Malformed numbers are
    ignored; an unknown sortBy is a 400.
    """
    raw = {
        "countries": countries,
        "location": location,
        "search": search,
        "minTuition": min_tuition,
        "maxTuition": max_tuition,
        "minRanking": min_ranking,
        "maxRanking": max_ranking,
        "topTier": top_tier,
        "minYear": min_year,
        "maxYear": max_year,
        "region": region,
        "affordability": affordability,
        "institutionAge": institution_age,
        "valueForMoney": value_for_money,
        "sortBy": sort_by,
        "sortOrder": sort_order,
        "page": page,
        "limit": limit,
    }
    params = {name: value for name, value in raw.items() if value is not None}
    logger.info(f"[ENDPOINT] /api called with {params}")
    return search_universities(params)

@app.get(
    "/api/compare",
    response_model=schemas.ComparisonResponse,
    responses={400: {"model": schemas.ErrorResponse}, 404: {"model": schemas.ErrorResponse}},
)
def compare(ids: str, explain: bool = False):
    """
    Compare two universities side by side.
    ids: two comma-separated university ids
    explain=true adds an AI-written explanation when Gemini is configured.
    """
    logger.info(f"[ENDPOINT] /api/compare called for {ids}")

    try:
        return compare_by_ids(ids.split(","), explain=explain)
    except ComparisonError as e:
        logger.warning(f"[ERROR] Comparison failed: {str(e)}")
        error = "NOT_FOUND" if e.status_code == 404 else "VALIDATION_ERROR"
        return JSONResponse(status_code=e.status_code, content={"error": error, "message": str(e)})

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
