from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from btsearch.core.config.settings import settings
from btsearch.core.engine.cancellation import Deadline
from btsearch.core.errors import SearchError
from btsearch.core.session.registry import SessionRecord, SessionRegistry, SessionStatus
from btsearch.core.session.spec import SearchSpec

router = APIRouter(tags=["searches"])

# Single-process registry (sessions live in memory only).
_registry = SessionRegistry()


# =========================
# Schemas
# =========================

class CreateSearchResponse(BaseModel):
    search_id: str
    spec_hash: str


class SearchDetailsResponse(BaseModel):
    search_id: str
    problem: str
    n: int
    spec_hash: str
    status: SessionStatus
    created_at_utc: datetime
    updated_at_utc: datetime
    emitted: int
    cursor: int
    stats: dict[str, int]


class SearchesListResponse(BaseModel):
    searches: list[SearchDetailsResponse]


class SolutionPageResponse(BaseModel):
    search_id: str
    solutions: list[list[int]]
    exhausted: bool
    cancelled: bool = Field(description="True if the page was cut short by the time budget")


def _details(rec: SessionRecord) -> SearchDetailsResponse:
    return SearchDetailsResponse(
        search_id=rec.search_id,
        problem=rec.problem,
        n=rec.n,
        spec_hash=rec.spec_hash,
        status=rec.status,
        created_at_utc=rec.created_at_utc,
        updated_at_utc=rec.updated_at_utc,
        emitted=rec.emitted,
        cursor=rec.cursor,
        stats=rec.stats,
    )


# =========================
# Routes
# =========================

@router.post("/searches", response_model=CreateSearchResponse)
def create_search(spec: SearchSpec) -> CreateSearchResponse:
    if spec.n > settings.max_problem_size:
        raise HTTPException(status_code=422, detail=f"n exceeds max_problem_size={settings.max_problem_size}")

    try:
        session = _registry.create(spec)
    except SearchError as e:
        # InvalidArgument / IndexOutOfRange / InvalidValue from engine construction or seeding
        raise HTTPException(status_code=422, detail=str(e))

    return CreateSearchResponse(search_id=session.search_id, spec_hash=spec.config_hash())


@router.get("/searches", response_model=SearchesListResponse)
def list_searches() -> SearchesListResponse:
    return SearchesListResponse(searches=[_details(r) for r in _registry.list()])


@router.get("/searches/{search_id}", response_model=SearchDetailsResponse)
def get_search(search_id: str) -> SearchDetailsResponse:
    session = _registry.get(search_id=search_id)
    if session is None:
        raise HTTPException(status_code=404, detail="search not found")
    return _details(session.record())


@router.post("/searches/{search_id}/next", response_model=SolutionPageResponse)
def next_solutions(
    search_id: str,
    limit: int = Query(default=1, ge=1),
) -> SolutionPageResponse:
    session = _registry.get(search_id=search_id)
    if session is None:
        raise HTTPException(status_code=404, detail="search not found")

    page = session.next_page(
        limit=min(limit, settings.max_page_size),
        cancel=Deadline(settings.page_time_budget_seconds),
    )
    return SolutionPageResponse(
        search_id=search_id,
        solutions=page.solutions,
        exhausted=page.exhausted,
        cancelled=page.cancelled,
    )


@router.post("/searches/{search_id}/reset", response_model=SearchDetailsResponse)
def reset_search(search_id: str) -> SearchDetailsResponse:
    session = _registry.get(search_id=search_id)
    if session is None:
        raise HTTPException(status_code=404, detail="search not found")
    session.reset()
    return _details(session.record())


@router.delete("/searches/{search_id}", status_code=204)
def delete_search(search_id: str) -> None:
    if not _registry.delete(search_id=search_id):
        raise HTTPException(status_code=404, detail="search not found")
