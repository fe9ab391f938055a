from __future__ import annotations

import structlog

from btsearch.core.engine.engine import BacktrackingEngine
from btsearch.core.session.spec import SearchSpec
from btsearch.problems.standard import PROBLEMS

log = structlog.get_logger()


def build_engine(spec: SearchSpec) -> BacktrackingEngine:
    """
    SearchSpec -> configured engine, positioned at the spec's seed (if any).
    """
    factory = PROBLEMS.get(spec.problem)
    if factory is None:
        raise ValueError(f"unsupported problem kind: {spec.problem}")

    engine = factory(spec.n)
    if spec.seed is not None:
        engine.seed_from(spec.seed.values, spec.seed.offset, spec.seed.length)

    log.debug("session.engine_built", problem=spec.problem, n=spec.n, seeded=spec.seed is not None)
    return engine
