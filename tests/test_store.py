"""Tests for PartitionedStore (store.py) – no crypto involved."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import exc as sa_exc

from core.errors import ConflictError, StorageError
from database import build_engine, build_session_factory, create_tables
from models.like import Like
from store import PartitionedStore, SealedValue

P1 = "1" * 64
P2 = "2" * 64


def _sv(name: str) -> SealedValue:
    """Fake sealed value: index and envelope derived from a readable name."""
    return SealedValue(index=f"idx-{name}", envelope=f"env-{name}")


@pytest.fixture(name="store")
def store_fixture(session) -> PartitionedStore:
    return PartitionedStore(session)


# ── Tags ─────────────────────────────────────────────────────────────


class TestTags:
    def test_insert_and_list_tags(self, store) -> None:
        store.insert_tag(P1, _sv("cat.png"), _sv("animal"))
        store.insert_tag(P1, _sv("cat.png"), _sv("cute"))
        assert sorted(store.list_tags(P1, "idx-cat.png")) == ["env-animal", "env-cute"]

    def test_list_targets(self, store) -> None:
        store.insert_tag(P1, _sv("cat.png"), _sv("animal"))
        store.insert_tag(P1, _sv("dog.png"), _sv("animal"))
        store.insert_tag(P1, _sv("car.png"), _sv("vehicle"))
        assert sorted(store.list_targets(P1, "idx-animal")) == ["env-cat.png", "env-dog.png"]

    def test_duplicate_is_conflict(self, store) -> None:
        store.insert_tag(P1, _sv("cat.png"), _sv("animal"))
        with pytest.raises(ConflictError):
            store.insert_tag(P1, SealedValue("idx-cat.png", "other-env"), SealedValue("idx-animal", "other-env"))

    def test_store_usable_after_conflict(self, store) -> None:
        store.insert_tag(P1, _sv("cat.png"), _sv("animal"))
        with pytest.raises(ConflictError):
            store.insert_tag(P1, _sv("cat.png"), _sv("animal"))
        store.insert_tag(P1, _sv("cat.png"), _sv("cute"))
        assert len(store.list_tags(P1, "idx-cat.png")) == 2

    def test_same_pair_in_other_partition_is_not_conflict(self, store) -> None:
        store.insert_tag(P1, _sv("cat.png"), _sv("animal"))
        store.insert_tag(P2, _sv("cat.png"), _sv("animal"))
        assert store.list_tags(P2, "idx-cat.png") == ["env-animal"]

    def test_partition_isolation(self, store) -> None:
        store.insert_tag(P1, _sv("cat.png"), _sv("animal"))
        assert store.list_tags(P2, "idx-cat.png") == []
        assert store.list_targets(P2, "idx-animal") == []

    def test_unknown_returns_empty(self, store) -> None:
        assert store.list_tags(P1, "idx-nothing") == []
        assert store.list_targets(P1, "idx-nothing") == []

    def test_tags_listed_in_insertion_order(self, store) -> None:
        # Names chosen so insertion order differs from any lexical order
        names = [f"tag-{n:02d}" for n in (7, 3, 11, 0, 9, 1, 5, 10, 2, 8, 4, 6)]
        for name in names:
            store.insert_tag(P1, _sv("cat.png"), _sv(name))
        assert store.list_tags(P1, "idx-cat.png") == [f"env-{n}" for n in names]

    def test_targets_listed_in_insertion_order(self, store) -> None:
        names = [f"img-{n:02d}.png" for n in (4, 0, 9, 2, 11, 6, 1, 8, 3, 10, 5, 7)]
        for name in names:
            store.insert_tag(P1, _sv(name), _sv("animal"))
        assert store.list_targets(P1, "idx-animal") == [f"env-{n}" for n in names]


# ── Likes ────────────────────────────────────────────────────────────


class TestLikes:
    def test_absent_is_zero(self, store) -> None:
        assert store.get_like_count(P1, "idx-cat.png") == 0

    def test_first_like_creates_counter(self, store) -> None:
        store.increment_like(P1, _sv("cat.png"))
        assert store.get_like_count(P1, "idx-cat.png") == 1

    def test_sequential_likes(self, store) -> None:
        for _ in range(3):
            store.increment_like(P1, _sv("cat.png"))
        assert store.get_like_count(P1, "idx-cat.png") == 3

    def test_keeps_first_envelope(self, store, session) -> None:
        store.increment_like(P1, SealedValue("idx-cat.png", "first"))
        store.increment_like(P1, SealedValue("idx-cat.png", "second"))
        row = session.query(Like).one()
        assert row.target == "first"
        assert row.like_count == 2

    def test_partition_isolation(self, store) -> None:
        store.increment_like(P1, _sv("cat.png"))
        store.increment_like(P1, _sv("cat.png"))
        store.increment_like(P2, _sv("cat.png"))
        assert store.get_like_count(P1, "idx-cat.png") == 2
        assert store.get_like_count(P2, "idx-cat.png") == 1

    def test_targets_counted_separately(self, store) -> None:
        store.increment_like(P1, _sv("cat.png"))
        store.increment_like(P1, _sv("dog.png"))
        assert store.get_like_count(P1, "idx-cat.png") == 1
        assert store.get_like_count(P1, "idx-dog.png") == 1


def test_concurrent_likes_are_not_lost(tmp_path) -> None:
    """N parallel upsert-increments on one row end at exactly N."""
    engine = build_engine(f"sqlite:///{tmp_path / 'likes.db'}")
    create_tables(engine)
    factory = build_session_factory(engine)
    n = 40

    def like(_):
        db = factory()
        try:
            PartitionedStore(db).increment_like(P1, _sv("cat.png"))
        finally:
            db.close()

    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(like, range(n)))

        db = factory()
        try:
            assert PartitionedStore(db).get_like_count(P1, "idx-cat.png") == n
        finally:
            db.close()
    finally:
        engine.dispose()


# ── Failure mapping ──────────────────────────────────────────────────


class TestStorageErrors:
    def test_query_failure_is_storage_error(self, store, monkeypatch) -> None:
        def boom(*args, **kwargs):
            raise sa_exc.OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(store.db, "query", boom)
        with pytest.raises(StorageError):
            store.list_tags(P1, "idx-cat.png")
        with pytest.raises(StorageError):
            store.get_like_count(P1, "idx-cat.png")

    def test_write_failure_is_storage_error(self, store, monkeypatch) -> None:
        def boom(*args, **kwargs):
            raise sa_exc.OperationalError("INSERT", {}, Exception("database is locked"))

        monkeypatch.setattr(store.db, "execute", boom)
        with pytest.raises(StorageError):
            store.increment_like(P1, _sv("cat.png"))

    def test_missing_table_is_storage_error(self, tmp_path) -> None:
        engine = build_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        db = build_session_factory(engine)()
        try:
            with pytest.raises(StorageError):
                PartitionedStore(db).list_tags(P1, "idx-cat.png")
        finally:
            db.close()
            engine.dispose()
