"""Tests for the asynchronous similarity index."""

import asyncio
import time

import numpy as np
import pytest

from accountlens.core.errors import DimensionMismatch, StoreUnavailable
from accountlens.core.models import NewImageRecord
from accountlens.core.vector_store import MemoryRecordStore, SimilarityIndex, cosine_similarity

from conftest import unit_vector


def new_record(handle, embedding, name=None, phash="0" * 16, context_tag=None):
    return NewImageRecord(
        embedding=unit_vector(embedding),
        perceptual_hash=phash,
        account_name=name or handle.lstrip("@"),
        account_handle=handle,
        context_tag=context_tag,
    )


class CountingStore(MemoryRecordStore):
    """Memory store that records how often initialize() runs."""

    def __init__(self, failures=0):
        super().__init__()
        self.init_calls = 0
        self.failures = failures

    def initialize(self):
        self.init_calls += 1
        time.sleep(0.05)
        if self.init_calls <= self.failures:
            raise OSError("disk unavailable")


class TestCosine:
    def test_self_similarity_is_one(self):
        v = unit_vector([0.3, -0.2, 0.9])
        assert cosine_similarity(v, v[None, :])[0] == pytest.approx(1.0, abs=1e-6)

    def test_bounds(self):
        rng = np.random.default_rng(3)
        matrix = rng.standard_normal((20, 8)).astype(np.float32)
        scores = cosine_similarity(unit_vector(rng.standard_normal(8)), matrix)
        assert np.all(scores <= 1.0 + 1e-6)
        assert np.all(scores >= -1.0 - 1e-6)

    def test_zero_vector_scores_zero(self):
        scores = cosine_similarity(np.zeros(3, dtype=np.float32), np.eye(3, dtype=np.float32))
        assert list(scores) == [0.0, 0.0, 0.0]


class TestInsert:
    @pytest.mark.asyncio
    async def test_insert_assigns_unique_ids(self, index):
        first = await index.insert(new_record("@a", [1, 0, 0]))
        second = await index.insert(new_record("@a", [0, 1, 0]))
        assert first != second
        assert first.startswith("img_")
        assert await index.count() == 2

    @pytest.mark.asyncio
    async def test_inserted_record_is_readable(self, index):
        record_id = await index.insert(new_record("@a", [1, 2, 3], context_tag="TGS", phash="ABCDEF0123456789"))
        record = await index.get(record_id)
        assert record.account_handle == "@a"
        assert record.context_tag == "TGS"
        assert record.perceptual_hash == "abcdef0123456789"
        assert record.created_at.tzinfo is not None
        np.testing.assert_allclose(record.embedding, unit_vector([1, 2, 3]))

    @pytest.mark.asyncio
    async def test_rejects_malformed_hash(self, index):
        with pytest.raises(ValueError):
            await index.insert(new_record("@a", [1, 0], phash="abc"))
        assert await index.count() == 0

    @pytest.mark.asyncio
    async def test_rejects_second_dimensionality(self, index):
        await index.insert(new_record("@a", [1, 0, 0]))
        with pytest.raises(DimensionMismatch) as info:
            await index.insert(new_record("@b", [1, 0]))
        assert info.value.expected == 3
        assert info.value.actual == 2
        assert await index.count() == 1

    @pytest.mark.asyncio
    async def test_concurrent_inserts_cannot_mix_dimensions(self, index):
        results = await asyncio.gather(
            index.insert(new_record("@a", np.ones(4))),
            index.insert(new_record("@b", np.ones(16))),
            return_exceptions=True,
        )

        assert isinstance(results[0], str)
        assert isinstance(results[1], DimensionMismatch)
        assert [len(r.embedding) for r in await index.get_all()] == [4]

    @pytest.mark.asyncio
    async def test_configured_dimension_enforced(self):
        index = SimilarityIndex(MemoryRecordStore(), dim=4)
        with pytest.raises(DimensionMismatch):
            await index.insert(new_record("@a", [1, 0, 0]))


class TestQueryTopN:
    @pytest.mark.asyncio
    async def test_empty_index_returns_empty_list(self, index):
        assert await index.query_top_n(unit_vector([1, 0]), 5) == []

    @pytest.mark.asyncio
    async def test_results_sorted_and_truncated(self, index):
        rng = np.random.default_rng(7)
        for i in range(12):
            await index.insert(new_record(f"@acct{i % 4}", rng.standard_normal(16)))

        results = await index.query_top_n(unit_vector(rng.standard_normal(16)), 5)
        scores = [r.embedding_score for r in results]
        assert len(results) == 5
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_length_capped_by_corpus_size(self, index):
        await index.insert(new_record("@a", [1, 0]))
        await index.insert(new_record("@b", [0, 1]))
        assert len(await index.query_top_n(unit_vector([1, 1]), 50)) == 2

    @pytest.mark.asyncio
    async def test_exact_match_ranks_first(self, index):
        await index.insert(new_record("@a", [1, 0, 0]))
        target = await index.insert(new_record("@b", [0.2, 0.9, 0.1]))
        await index.insert(new_record("@c", [0, 0, 1]))

        results = await index.query_top_n(unit_vector([0.2, 0.9, 0.1]), 3)
        assert results[0].record.id == target
        assert results[0].embedding_score == pytest.approx(1.0, abs=1e-6)

    @pytest.mark.asyncio
    async def test_dimension_mismatch_raises(self, index):
        rng = np.random.default_rng(0)
        await index.insert(new_record("@a", rng.standard_normal(256)))
        with pytest.raises(DimensionMismatch) as info:
            await index.query_top_n(unit_vector(rng.standard_normal(512)), 10)
        assert info.value.expected == 256
        assert info.value.actual == 512

    @pytest.mark.asyncio
    async def test_configured_dimension_checked_before_scan(self):
        index = SimilarityIndex(MemoryRecordStore(), dim=256)
        with pytest.raises(DimensionMismatch):
            await index.query_top_n(unit_vector(np.ones(512)), 10)

    @pytest.mark.asyncio
    async def test_n_must_be_positive(self, index):
        with pytest.raises(ValueError):
            await index.query_top_n(unit_vector([1, 0]), 0)


class TestAccounts:
    @pytest.mark.asyncio
    async def test_unique_accounts_sorted_by_count(self, index):
        await index.insert(new_record("@solo", [1, 0], name="Solo"))
        for vec in ([0, 1], [1, 1], [1, 2]):
            await index.insert(new_record("@busy", vec, name="Busy"))
        await index.insert(new_record("@pair", [2, 1], name="Pair"))
        await index.insert(new_record("@pair", [3, 1], name="Pair"))

        accounts = await index.unique_accounts()
        assert [(a.handle, a.count) for a in accounts] == [("@busy", 3), ("@pair", 2), ("@solo", 1)]
        assert accounts[0].name == "Busy"

    @pytest.mark.asyncio
    async def test_get_by_account_handle(self, index):
        a1 = await index.insert(new_record("@a", [1, 0]))
        await index.insert(new_record("@b", [0, 1]))
        a2 = await index.insert(new_record("@a", [1, 1]))

        records = await index.get_by_account_handle("@a")
        assert {r.id for r in records} == {a1, a2}
        assert await index.get_by_account_handle("@missing") == []

    @pytest.mark.asyncio
    async def test_delete_and_clear(self, index):
        a1 = await index.insert(new_record("@a", [1, 0]))
        await index.insert(new_record("@b", [0, 1]))

        assert await index.delete(a1) is True
        assert await index.delete(a1) is False
        assert await index.get_by_account_handle("@a") == []
        assert await index.clear() == 1
        assert await index.count() == 0
        assert await index.unique_accounts() == []


class TestInitialization:
    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_initialization(self):
        store = CountingStore()
        index = SimilarityIndex(store)

        counts = await asyncio.gather(*(index.count() for _ in range(8)))
        assert counts == [0] * 8
        assert store.init_calls == 1

        await index.count()
        assert store.init_calls == 1

    @pytest.mark.asyncio
    async def test_cancelled_first_caller_does_not_break_initialization(self):
        store = CountingStore()
        index = SimilarityIndex(store)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(index.count(), 0.01)

        assert await index.count() == 0
        assert store.init_calls == 1

    @pytest.mark.asyncio
    async def test_failed_initialization_surfaces_and_can_retry(self):
        store = CountingStore(failures=1)
        index = SimilarityIndex(store)

        results = await asyncio.gather(index.count(), index.count(), return_exceptions=True)
        assert all(isinstance(r, StoreUnavailable) for r in results)
        assert store.init_calls == 1

        assert await index.count() == 0
        assert store.init_calls == 2
