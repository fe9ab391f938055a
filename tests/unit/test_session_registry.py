from __future__ import annotations

import threading

import pytest
from pydantic import ValidationError

from btsearch.core.errors import IndexOutOfRange, InvalidValue
from btsearch.core.session.factory import build_engine
from btsearch.core.session.registry import SessionRegistry
from btsearch.core.session.spec import SearchSpec, SeedSpec
from btsearch.problems.standard import queens

QUEENS_6 = [
    [1, 3, 5, 0, 2, 4],
    [2, 5, 1, 4, 0, 3],
    [3, 0, 4, 1, 5, 2],
    [4, 2, 0, 5, 3, 1],
]


# ---------------- SearchSpec ----------------


def test_spec_hash_is_deterministic() -> None:
    a = SearchSpec(problem="queens", n=6, tags={"k": "v"})
    b = SearchSpec.model_validate({"problem": "queens", "n": 6, "tags": {"k": "v"}})
    c = SearchSpec(problem="permutations", n=6)

    assert a.config_hash() == b.config_hash()
    assert a.config_hash() != c.config_hash()
    assert len(a.config_hash()) == 64


@pytest.mark.parametrize(
    "payload",
    [
        {"problem": "queens", "n": 0},
        {"problem": "sudoku", "n": 4},
        {"problem": "queens", "n": 4, "seed": {"values": [0, 1, 2, 3, 0], "length": 5}},
    ],
)
def test_spec_rejects_invalid_payloads(payload: dict) -> None:
    with pytest.raises(ValidationError):
        SearchSpec.model_validate(payload)


# ---------------- Factory ----------------


def test_build_engine_applies_seed() -> None:
    engine = build_engine(SearchSpec(problem="queens", n=4, seed=SeedSpec(values=[1])))

    assert engine.find_next() == [2, 0, 3, 1]


def test_build_engine_matches_standard_factory() -> None:
    engine = build_engine(SearchSpec(problem="queens", n=6))

    assert list(engine.iter_solutions()) == list(queens(6).iter_solutions())


def test_build_engine_surfaces_seed_errors() -> None:
    with pytest.raises(InvalidValue):
        build_engine(SearchSpec(problem="queens", n=4, seed=SeedSpec(values=[4])))
    with pytest.raises(IndexOutOfRange):
        build_engine(SearchSpec(problem="queens", n=4, seed=SeedSpec(values=[0], offset=2)))


# ---------------- Sessions ----------------


def test_session_pages_through_solutions() -> None:
    registry = SessionRegistry()
    session = registry.create(SearchSpec(problem="queens", n=6))

    first = session.next_page(limit=3)
    assert first.solutions == QUEENS_6[:3]
    assert not first.exhausted
    assert not first.cancelled
    assert session.record().status == "ready"

    second = session.next_page(limit=10)
    assert second.solutions == QUEENS_6[3:]
    assert second.exhausted

    rec = session.record()
    assert rec.status == "exhausted"
    assert rec.emitted == 4
    assert rec.cursor == -1
    assert rec.stats["solutions"] == 4


def test_session_pause_and_resume_loses_nothing() -> None:
    registry = SessionRegistry()
    session = registry.create(SearchSpec(problem="queens", n=6))
    cancel = threading.Event()
    cancel.set()

    page = session.next_page(limit=2, cancel=cancel)
    assert page.cancelled
    assert page.solutions == []
    assert session.record().status == "paused"

    page = session.next_page(limit=10)
    assert page.solutions == QUEENS_6


def test_session_reset_replays_seed() -> None:
    registry = SessionRegistry()
    session = registry.create(SearchSpec(problem="queens", n=4, seed=SeedSpec(values=[0])))

    assert session.next_page(limit=5).solutions == [[1, 3, 0, 2], [2, 0, 3, 1]]

    session.reset()
    rec = session.record()
    assert rec.status == "ready"
    assert rec.emitted == 0
    assert session.next_page(limit=1).solutions == [[1, 3, 0, 2]]


def test_session_rejects_non_positive_limit() -> None:
    session = SessionRegistry().create(SearchSpec(problem="permutations", n=3))

    with pytest.raises(ValueError):
        session.next_page(limit=0)


def test_empty_seed_session_starts_exhausted() -> None:
    session = SessionRegistry().create(SearchSpec(problem="queens", n=4, seed=SeedSpec(values=[])))

    assert session.record().status == "exhausted"
    page = session.next_page(limit=1)
    assert page.solutions == []
    assert page.exhausted


def test_registry_get_list_delete() -> None:
    registry = SessionRegistry()
    a = registry.create(SearchSpec(problem="queens", n=4))
    b = registry.create(SearchSpec(problem="permutations", n=3))

    assert registry.get(search_id=a.search_id) is a
    assert a.search_id != b.search_id

    b.next_page(limit=1)
    listed = registry.list()
    assert [r.search_id for r in listed] == [b.search_id, a.search_id]

    assert registry.delete(search_id=a.search_id)
    assert not registry.delete(search_id=a.search_id)
    assert registry.get(search_id=a.search_id) is None


def test_registry_does_not_register_invalid_seed() -> None:
    registry = SessionRegistry()

    with pytest.raises(InvalidValue):
        registry.create(SearchSpec(problem="queens", n=4, seed=SeedSpec(values=[7])))

    assert registry.list() == []


def test_concurrent_paging_is_serialized() -> None:
    session = SessionRegistry().create(SearchSpec(problem="permutations", n=6))
    pages: list[list[list[int]]] = []
    lock = threading.Lock()

    def worker() -> None:
        while True:
            page = session.next_page(limit=7)
            with lock:
                pages.append(page.solutions)
            if page.exhausted:
                return

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    seen = [tuple(s) for page in pages for s in page]
    assert len(seen) == 720
    assert len(set(seen)) == 720
