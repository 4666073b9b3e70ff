"""
Unit tests for StorageService key generation.
"""
from app.services.storage_service import StorageService


class TestFileKeys:
    """Object keys are namespaced per uploader and never collide."""

    def test_key_keeps_sanitized_name(self):
        service = StorageService()

        key = service.build_file_key("u1", "../trip/map.png")

        assert key.startswith("uploads/u1/")
        assert key.endswith("_trip_map.png")
        assert "/.." not in key

    def test_keys_are_unique(self):
        service = StorageService()

        assert service.build_file_key("u1", "a.png") != service.build_file_key("u1", "a.png")

    def test_key_without_name(self):
        service = StorageService()

        key = service.build_file_key("u1")

        assert key.startswith("uploads/u1/")
        assert len(key.rsplit("/", 1)[1]) == 16

    def test_long_name_keeps_extension(self):
        service = StorageService()

        key = service.build_file_key("u1", "x" * 300 + ".jpeg")

        suffix = key.rsplit("/", 1)[1].split("_", 1)[1]
        assert len(suffix) == 100
        assert suffix.endswith(".jpeg")
