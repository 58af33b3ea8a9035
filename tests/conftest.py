"""Shared test fixtures for AccountLens tests."""

from datetime import datetime, timezone

import numpy as np
import pytest
from PIL import Image

from accountlens.core.embedders import PixelEmbedder
from accountlens.core.models import ImageRecord
from accountlens.core.search import SearchOrchestrator
from accountlens.core.vector_store import MemoryRecordStore, SimilarityIndex


@pytest.fixture
def red_square_array():
    """Generate a 200x200 red square on white background."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    img[40:160, 40:160] = [200, 30, 30]
    return img


@pytest.fixture
def red_square_image(red_square_array):
    return Image.fromarray(red_square_array)


@pytest.fixture
def blue_circle_image():
    """Generate a 200x200 blue circle on white background."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    yy, xx = np.ogrid[:200, :200]
    img[(xx - 100) ** 2 + (yy - 100) ** 2 <= 60 ** 2] = [30, 30, 200]
    return Image.fromarray(img)


@pytest.fixture
def checkerboard_image():
    """Generate a 200x200 checkerboard pattern."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 200
    for y in range(0, 200, 20):
        for x in range(0, 200, 20):
            if (x // 20 + y // 20) % 2 == 0:
                img[y:y + 20, x:x + 20] = [50, 50, 50]
    return Image.fromarray(img)


@pytest.fixture
def noise_image():
    """Generate a 200x200 random noise image."""
    rng = np.random.RandomState(42)
    return Image.fromarray(rng.randint(0, 255, (200, 200, 3), dtype=np.uint8))


@pytest.fixture
def embedder():
    return PixelEmbedder(dim=64)


@pytest.fixture
def index():
    return SimilarityIndex(MemoryRecordStore())


@pytest.fixture
def orchestrator(embedder, index):
    return SearchOrchestrator(embedder=embedder, index=index)


def unit_vector(values):
    vector = np.asarray(values, dtype=np.float32)
    return vector / np.linalg.norm(vector)


def make_record(record_id, handle, embedding, phash="0" * 16, name=None, context_tag=None):
    return ImageRecord(
        id=record_id,
        embedding=unit_vector(embedding),
        perceptual_hash=phash,
        account_name=name or handle.lstrip("@").title(),
        account_handle=handle,
        context_tag=context_tag,
        created_at=datetime.now(timezone.utc),
    )
