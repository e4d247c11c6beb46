"""
Unit tests for ImageStore
"""
import pytest

from mathsnap.storage import ImageStore


@pytest.mark.asyncio
async def test_save_writes_png_and_returns_url(tmp_path):
    store = ImageStore(tmp_path / "public" / "images", "/images/")

    url = await store.save(b"\x89PNG data")

    assert url.startswith("/images/")
    assert url.endswith(".png")
    assert (tmp_path / "public" / "images" / url.split("/")[-1]).read_bytes() == b"\x89PNG data"


@pytest.mark.asyncio
async def test_names_are_unique(image_store):
    urls = {await image_store.save(b"x") for _ in range(5)}

    assert len(urls) == 5
