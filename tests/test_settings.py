"""Tests for settings loading, logging setup, and wiring."""

import logging

import pytest
from pydantic import ValidationError

from accountlens import create_orchestrator
from accountlens.config import AppSettings, EmbedderSettings, VectorStoreSettings, configure_logging
from accountlens.core.embedders import ClipEmbedder, PixelEmbedder
from accountlens.core.factory import create_embedder
from accountlens.core.vector_store import MemoryRecordStore, SqliteRecordStore


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings()
        assert settings.top_n == 50
        assert settings.embedder.name == "pixel"
        assert settings.embedder.dim == 512
        assert settings.scoring.embedding_weight == 0.50
        assert settings.scoring.hash_weight == 0.30
        assert settings.scoring.metadata_weight == 0.15
        assert settings.scoring.frequency_weight == 0.05

    def test_from_env_overrides(self):
        settings = AppSettings.from_env(
            {
                "ACCOUNTLENS_TOP_N": "10",
                "ACCOUNTLENS_EMBEDDER": "clip",
                "ACCOUNTLENS_DIM": "768",
                "ACCOUNTLENS_DATABASE_PATH": "",
                "UNRELATED": "ignored",
            }
        )
        assert settings.top_n == 10
        assert settings.embedder.name == "clip"
        assert settings.embedder.dim == 768
        assert settings.embedder.device == "cpu"
        assert settings.vector_store.database_path is None

    def test_from_env_without_overrides_matches_defaults(self):
        assert AppSettings.from_env({}) == AppSettings()

    def test_top_n_must_be_positive(self):
        with pytest.raises(ValidationError):
            AppSettings(top_n=0)

    def test_save_and_load_roundtrip(self, tmp_path):
        path = tmp_path / "config" / "settings.json"
        original = AppSettings(top_n=7, embedder=EmbedderSettings(dim=128))
        original.save(path)

        loaded = AppSettings.from_file(path)
        assert loaded.top_n == 7
        assert loaded.embedder.dim == 128

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{"scoring": {"hash_weight": 0.4}}', encoding="utf-8")

        loaded = AppSettings.from_file(path)
        assert loaded.scoring.hash_weight == 0.4
        assert loaded.scoring.embedding_weight == 0.50
        assert loaded.top_n == 50


class TestFactory:
    def test_create_embedder(self):
        assert isinstance(create_embedder(EmbedderSettings(name="pixel", dim=32)), PixelEmbedder)
        assert isinstance(create_embedder(EmbedderSettings(name="clip")), ClipEmbedder)
        with pytest.raises(ValueError):
            create_embedder(EmbedderSettings(name="resnet"))

    def test_memory_store_when_no_database_path(self):
        settings = AppSettings(
            top_n=5,
            embedder=EmbedderSettings(dim=64),
            vector_store=VectorStoreSettings(database_path=None),
        )
        orchestrator = create_orchestrator(settings)

        assert isinstance(orchestrator.index.store, MemoryRecordStore)
        assert orchestrator.index.dim == 64
        assert orchestrator.top_n == 5
        assert orchestrator.embedder.dim == 64

    def test_sqlite_store_and_unenforced_dim(self, tmp_path):
        settings = AppSettings(
            vector_store=VectorStoreSettings(database_path=tmp_path / "db.sqlite3", enforce_dim=False)
        )
        orchestrator = create_orchestrator(settings)

        assert isinstance(orchestrator.index.store, SqliteRecordStore)
        assert orchestrator.index.dim is None

    @pytest.mark.asyncio
    async def test_scoring_weights_are_applied(self, red_square_image):
        settings = AppSettings.model_validate(
            {
                "embedder": {"dim": 32},
                "vector_store": {"database_path": None},
                "scoring": {"embedding_weight": 1.0, "hash_weight": 0.0, "metadata_weight": 0.0, "frequency_weight": 0.0},
            }
        )
        orchestrator = create_orchestrator(settings)
        await orchestrator.register(red_square_image, "Red", "@red")

        top = (await orchestrator.search(red_square_image))[0]
        assert top.total_score == pytest.approx(1.0, abs=1e-5)


def test_configure_logging_installs_one_handler():
    logger = configure_logging("debug")
    configure_logging("info")

    tagged = [h for h in logger.handlers if getattr(h, "_accountlens", False)]
    assert len(tagged) == 1
    assert logger.level == logging.INFO
    assert logger.name == "accountlens"
