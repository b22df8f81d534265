from unittest.mock import patch

import pytest

from core.imaging.processor import ImageProcessor
from core.models.errors import InvalidImageError, StorageError
from core.models.image import ImageObject
from core.models.size import SizeSpec
from core.variants.resize_cache import ResizeCacheManager

KEY = "dogs/1700000000000-abc"


@pytest.fixture
def original(sample_png_binary) -> ImageObject:
    return ImageObject(data=sample_png_binary, content_type="image/png")


@pytest.fixture
def cache(memory_store) -> ResizeCacheManager:
    return ResizeCacheManager(memory_store, ImageProcessor())


class TestResizeCacheManager:
    def test_miss_creates_and_stores_variant(self, cache, memory_store, original, image_size) -> None:
        result = cache.get_or_create(original, KEY, SizeSpec(width=100, height=100))

        assert memory_store.put_calls == [f"{KEY}_100x100"]
        assert result.content_type == "image/png"
        assert image_size(result.data) == (100, 75)
        assert memory_store.objects[f"{KEY}_100x100"] == result

    def test_hit_returns_cached_bytes(self, cache, memory_store, original) -> None:
        cached = ImageObject(data=b"cached-variant", content_type="image/png")
        memory_store.objects[f"{KEY}_400x300"] = cached

        with patch.object(cache.processor, "resize_to_fit") as mock_resize:
            result = cache.get_or_create(original, KEY, SizeSpec(width=400, height=300))

        assert result == cached
        mock_resize.assert_not_called()
        assert memory_store.put_calls == []

    def test_second_request_is_served_from_cache(self, cache, memory_store, original) -> None:
        size = SizeSpec(width=50, height=50)

        first = cache.get_or_create(original, KEY, size)
        second = cache.get_or_create(original, KEY, size)

        assert first == second
        assert memory_store.put_calls == [f"{KEY}_50x50"]

    def test_no_upscale(self, cache, original, image_size) -> None:
        result = cache.get_or_create(original, KEY, SizeSpec(width=800, height=600))

        assert image_size(result.data) == (200, 150)

    def test_storage_error_is_not_a_miss(self, cache, memory_store, original, failing_storage_error) -> None:
        memory_store.get_error = failing_storage_error

        with pytest.raises(StorageError):
            cache.get_or_create(original, KEY, SizeSpec(width=10, height=10))

        assert memory_store.put_calls == []

    def test_write_failure_propagates(self, cache, memory_store, original) -> None:
        memory_store.put_error = StorageError(message="Unable to store object at this time")

        with pytest.raises(StorageError):
            cache.get_or_create(original, KEY, SizeSpec(width=10, height=10))

    def test_undecodable_original(self, cache, memory_store) -> None:
        broken = ImageObject(data=b"not-an-image", content_type="image/png")

        with pytest.raises(InvalidImageError):
            cache.get_or_create(broken, KEY, SizeSpec(width=10, height=10))

        assert memory_store.put_calls == []

    def test_exactly_one_write_per_variant(self, cache, memory_store, original) -> None:
        size = SizeSpec(width=400, height=300)

        first = cache.get_or_create(original, "k", size)
        second = cache.get_or_create(original, "k", size)

        assert memory_store.put_calls == ["k_400x300"]
        assert second.data == first.data
