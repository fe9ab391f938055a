from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Literal, Optional

import structlog

from btsearch.core.engine.cancellation import CancellationToken
from btsearch.core.engine.engine import BacktrackingEngine
from btsearch.core.errors import Cancelled
from btsearch.core.logging.setup import bind_context
from btsearch.core.session.factory import build_engine
from btsearch.core.session.spec import SearchSpec

log = structlog.get_logger()

SessionStatus = Literal["ready", "paused", "exhausted"]


@dataclass(frozen=True, slots=True)
class SolutionPage:
    solutions: list[list[int]]
    exhausted: bool
    cancelled: bool


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """
    Immutable point-in-time view of a session for API/ops visibility.
    """
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


class SearchSession:
    """
    A live engine plus the bookkeeping needed to page through it.

    Every engine call goes through the session lock: the engine itself
    is not safe for concurrent use.
    """

    def __init__(self, *, search_id: str, spec: SearchSpec, engine: BacktrackingEngine) -> None:
        self._lock = Lock()
        self._search_id = search_id
        self._spec = spec
        self._spec_hash = spec.config_hash()
        self._engine = engine
        self._status: SessionStatus = "exhausted" if engine.is_exhausted else "ready"
        self._emitted = 0
        self._created_at = datetime.now(timezone.utc)
        self._updated_at = self._created_at

    @property
    def search_id(self) -> str:
        return self._search_id

    @property
    def spec(self) -> SearchSpec:
        return self._spec

    def next_page(self, *, limit: int, cancel: Optional[CancellationToken] = None) -> SolutionPage:
        """
        Collect up to `limit` further solutions.

        A cancellation mid-page is not an error here: the solutions found so
        far are returned with cancelled=True and the next call resumes.
        """
        if limit <= 0:
            raise ValueError("limit must be > 0")

        solutions: list[list[int]] = []
        cancelled = False
        exhausted = False

        with self._lock:
            try:
                while len(solutions) < limit:
                    solution = self._engine.find_next(cancel)
                    if solution is None:
                        exhausted = True
                        break
                    solutions.append(solution)
            except Cancelled as exc:
                cancelled = True
                log.info("session.paused", search_id=self._search_id, cursor=exc.cursor, collected=len(solutions))

            self._emitted += len(solutions)
            self._status = "exhausted" if exhausted else ("paused" if cancelled else "ready")
            self._updated_at = datetime.now(timezone.utc)

        return SolutionPage(solutions=solutions, exhausted=exhausted, cancelled=cancelled)

    def reset(self) -> None:
        """
        Restart from the spec (including its seed).
        """
        engine = build_engine(self._spec)
        with self._lock:
            self._engine = engine
            self._emitted = 0
            self._status = "exhausted" if engine.is_exhausted else "ready"
            self._updated_at = datetime.now(timezone.utc)
        log.info("session.reset", search_id=self._search_id)

    def record(self) -> SessionRecord:
        with self._lock:
            return SessionRecord(
                search_id=self._search_id,
                problem=self._spec.problem,
                n=self._spec.n,
                spec_hash=self._spec_hash,
                status=self._status,
                created_at_utc=self._created_at,
                updated_at_utc=self._updated_at,
                emitted=self._emitted,
                cursor=self._engine.cursor,
                stats=self._engine.stats.as_dict(),
            )


class SessionRegistry:
    """
    Thread-safe in-process registry of search sessions.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._sessions: dict[str, SearchSession] = {}

    def create(self, spec: SearchSpec) -> SearchSession:
        # build first: invalid specs never get an id
        engine = build_engine(spec)

        created_at = datetime.now(timezone.utc)
        search_id = f"{created_at.strftime('%Y%m%dT%H%M%SZ')}_{secrets.token_hex(4)}"
        session = SearchSession(search_id=search_id, spec=spec, engine=engine)

        with self._lock:
            self._sessions[search_id] = session

        bind_context(search_id=search_id)
        log.info("session.created", search_id=search_id, problem=spec.problem, n=spec.n)
        return session

    def get(self, *, search_id: str) -> SearchSession | None:
        with self._lock:
            return self._sessions.get(search_id)

    def list(self) -> list[SessionRecord]:
        with self._lock:
            sessions = list(self._sessions.values())
        records = [s.record() for s in sessions]
        records.sort(key=lambda r: r.updated_at_utc, reverse=True)
        return records

    def delete(self, *, search_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(search_id, None)
        if removed is not None:
            log.info("session.deleted", search_id=search_id)
        return removed is not None
