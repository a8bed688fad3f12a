from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Annotated, List, Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import uvicorn

from problem_finder.config import API_HOST, API_PORT, CORS_ORIGINS, DATA_DIRECTORY, MAX_MATRIX_BYTES
from problem_finder.domain.models import Platform, QueryResult
from problem_finder.application.search_service import ProblemSearchService

# ── API Models ───────────────────────────────────────────────────────────────
class ProblemSchema(BaseModel):
    name: str
    url: str
    score: float

class PlatformStatusSchema(BaseModel):
    platform: str
    initialized: bool
    data_ready: bool
    problem_count: int
    vocabulary_size: int
    degraded: bool
    error: Optional[str] = None
    files: dict = {}

PROMPT_MESSAGE = {"message": "Please provide a query."}

# Composed once at process start and handed to every request
search_service = ProblemSearchService.from_data_directory(DATA_DIRECTORY, MAX_MATRIX_BYTES)

def get_search_service() -> ProblemSearchService:
    return search_service

SearchServiceDep = Annotated[ProblemSearchService, Depends(get_search_service)]

# ── App Initialization ───────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    await get_search_service().warm_up()
    print("[API] Problem Finder API ready.")
    yield

app = FastAPI(
    title="Problem Finder API",
    description="Keyword search over competitive-programming problem sets.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS Middleware ──────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Endpoints ────────────────────────────────────────────────────────────────
@app.get("/health")
def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

@app.get("/status", response_model=List[PlatformStatusSchema])
async def get_status(service: SearchServiceDep):
    """Per-platform readiness, vocabulary size and artifact file sizes."""
    statuses = await service.get_statuses()
    return [
        PlatformStatusSchema(**asdict(status), files=files)
        for status, files in zip(statuses, service.get_file_stats())
    ]

@app.get("/")
async def search_all(
    service: SearchServiceDep,
    q: str = "",
    n: int = Query(-1, description="Max results, <= 0 for all"),
):
    """Search every platform and merge the results by score."""
    return await _search(service, q, None, n)

@app.get("/{platform}/")
async def search_platform(
    platform: Platform,
    service: SearchServiceDep,
    q: str = "",
    n: int = Query(-1, description="Max results, <= 0 for all"),
):
    return await _search(service, q, platform, n)

async def _search(service: ProblemSearchService, q: str, platform: Optional[Platform], n: int):
    if not q:
        return PROMPT_MESSAGE

    try:
        results = await service.search(q, platform=platform, limit=n)
        return [_to_schema(result) for result in results]
    except Exception as e:
        print(f"[API] Search failed for '{q}': {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

def _to_schema(result: QueryResult) -> ProblemSchema:
    return ProblemSchema(name=result.name, url=result.url, score=result.score)

if __name__ == "__main__":
    uvicorn.run(app, host=API_HOST, port=API_PORT)
