from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
from freezegun import freeze_time

from mediastore.errors import WriteFailure
from mediastore.models.upload import ResourceKind, StorageMode
from mediastore.storage.local import LocalStorage
from tests.conftest import HUGE_PNG_HEADER, MKV_HEADER

# 2023-11-14 22:13:20 UTC == 1700000000000 ms
FROZEN_AT = "2023-11-14 22:13:20"


class TestLocalStorage:
    def test_mode(self, tmp_path):
        assert LocalStorage(str(tmp_path)).mode is StorageMode.LOCAL

    @freeze_time(FROZEN_AT)
    def test_store_uses_timestamp_prefix(self, tmp_path, incoming):
        storage = LocalStorage(str(tmp_path))
        descriptor = storage.store(incoming("photo.png"))

        assert descriptor.generated_name == "1700000000000-photo.png"
        assert descriptor.location == str((tmp_path / "1700000000000-photo.png").resolve())
        assert descriptor.url == "/uploads/1700000000000-photo.png"
        assert descriptor.original_name == "photo.png"

    def test_store_writes_content(self, tmp_path, incoming, png_bytes):
        storage = LocalStorage(str(tmp_path))
        descriptor = storage.store(incoming("photo.png", png_bytes))

        written = tmp_path / descriptor.generated_name
        assert written.read_bytes() == png_bytes
        assert descriptor.size == len(png_bytes)
        assert descriptor.resource_kind is ResourceKind.IMAGE

    def test_video_kind_from_content(self, tmp_path, incoming):
        storage = LocalStorage(str(tmp_path))
        descriptor = storage.store(incoming("clip.mkv", MKV_HEADER))
        assert descriptor.resource_kind is ResourceKind.VIDEO

    def test_empty_file_is_stored(self, tmp_path, incoming):
        storage = LocalStorage(str(tmp_path))
        descriptor = storage.store(incoming("empty.png", b""))
        assert (tmp_path / descriptor.generated_name).read_bytes() == b""
        assert descriptor.size == 0

    def test_oversized_image_is_stored(self, tmp_path, incoming):
        storage = LocalStorage(str(tmp_path))
        descriptor = storage.store(incoming("big.png", HUGE_PNG_HEADER))

        assert descriptor.resource_kind is ResourceKind.IMAGE
        assert [p.name for p in tmp_path.iterdir()] == [descriptor.generated_name]

    @freeze_time(FROZEN_AT)
    def test_same_name_same_millisecond_does_not_collide(self, tmp_path, incoming):
        storage = LocalStorage(str(tmp_path))
        first = storage.store(incoming("photo.png", b"one"))
        second = storage.store(incoming("photo.png", b"two"))

        assert first.generated_name == "1700000000000-photo.png"
        assert second.generated_name == "1700000000001-photo.png"
        assert (tmp_path / first.generated_name).read_bytes() == b"one"
        assert (tmp_path / second.generated_name).read_bytes() == b"two"

    @freeze_time(FROZEN_AT)
    def test_concurrent_identical_names_are_distinct(self, tmp_path, incoming):
        storage = LocalStorage(str(tmp_path))
        files = [incoming("photo.png", str(i).encode()) for i in range(8)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            descriptors = list(pool.map(storage.store, files))

        names = {d.generated_name for d in descriptors}
        assert len(names) == 8
        assert len(list(tmp_path.iterdir())) == 8

    def test_url_prefix_and_quoting(self, tmp_path, incoming):
        storage = LocalStorage(str(tmp_path), url_prefix="/media/")
        descriptor = storage.store(incoming("my photo.png"))
        assert descriptor.url == f"/media/{descriptor.generated_name.replace(' ', '%20')}"

    def test_missing_directory_is_write_failure(self, tmp_path, incoming):
        storage = LocalStorage(str(tmp_path / "does-not-exist"))
        with pytest.raises(WriteFailure):
            storage.store(incoming("photo.png"))

    def test_does_not_create_directory(self, tmp_path):
        LocalStorage(str(tmp_path / "later"))
        assert not (tmp_path / "later").exists()

    def test_write_error_removes_partial_file(self, tmp_path, incoming):
        storage = LocalStorage(str(tmp_path))

        class _Broken:
            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def write(self, data):
                raise OSError("disk full")

        real_open = type(tmp_path).open

        def fake_open(path, mode="r", *args, **kwargs):
            if mode == "xb":
                real_open(path, mode).close()
                return _Broken()
            return real_open(path, mode, *args, **kwargs)

        with patch.object(type(tmp_path), "open", fake_open):
            with pytest.raises(WriteFailure, match="disk full"):
                storage.store(incoming("photo.png"))
        assert list(tmp_path.iterdir()) == []
