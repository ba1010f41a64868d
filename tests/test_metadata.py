"""Tests for source metadata providers."""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path

import pytest
from PIL import Image

from sizeset.metadata import (
    PillowMetadataProvider,
    SourceMetadataProvider,
    StaticMetadataProvider,
    lookup_size,
)


@pytest.fixture
def image_root(tmp_path: Path) -> Path:
    """Directory holding a 12x7 PNG, a nested JPEG and a non-image file."""
    Image.new("RGB", (12, 7)).save(tmp_path / "pixel.png")
    (tmp_path / "photos").mkdir()
    Image.new("RGB", (30, 20)).save(tmp_path / "photos" / "汉字.jpg")
    (tmp_path / "notes.png").write_text("not an image")
    return tmp_path


class TestStaticMetadataProvider:
    """In-memory lookup."""

    def test_known_and_unknown(self) -> None:
        provider = StaticMetadataProvider({"/a.png": (10, 20)})
        assert provider.get_size("/a.png") == (10, 20)
        assert provider.get_size("/b.png") is None

    def test_satisfies_protocol(self) -> None:
        assert isinstance(StaticMetadataProvider({}), SourceMetadataProvider)


class TestPillowMetadataProvider:
    """Header reads from files on disk."""

    def test_reads_size(self, image_root: Path) -> None:
        provider = PillowMetadataProvider(image_root)
        assert provider.get_size("/pixel.png") == (12, 7)

    def test_nested_encoded_path(self, image_root: Path) -> None:
        provider = PillowMetadataProvider(image_root)
        assert provider.get_size("/photos/%E6%B1%89%E5%AD%97.jpg") == (30, 20)

    def test_missing_file(self, image_root: Path) -> None:
        assert PillowMetadataProvider(image_root).get_size("/missing.png") is None

    def test_unreadable_file(self, image_root: Path) -> None:
        assert PillowMetadataProvider(image_root).get_size("/notes.png") is None

    def test_absolute_url_unknown(self, image_root: Path) -> None:
        provider = PillowMetadataProvider(image_root)
        assert provider.get_size("https://images.test/pixel.png") is None

    def test_path_escaping_root(self, image_root: Path) -> None:
        provider = PillowMetadataProvider(image_root / "photos")
        assert provider.get_size("/../pixel.png") is None

    def test_query_string_ignored(self, image_root: Path) -> None:
        provider = PillowMetadataProvider(str(image_root))
        assert provider.get_size("/pixel.png?v=3") == (12, 7)


class TestLookupSize:
    """lookup_size accepts sync and async providers."""

    def test_sync_provider(self) -> None:
        provider = StaticMetadataProvider({"/a.png": (1, 2)})
        assert asyncio.run(lookup_size(provider, "/a.png")) == (1, 2)

    def test_async_provider(self) -> None:
        class _Remote:
            def __init__(self) -> None:
                self.calls: list[str] = []

            async def get_size(self, src: str) -> tuple[int, int] | None:
                self.calls.append(src)
                return None if src.endswith(".gif") else (64, 48)

        remote = _Remote()
        assert asyncio.run(lookup_size(remote, "/a.png")) == (64, 48)
        assert asyncio.run(lookup_size(remote, "/a.gif")) is None
        assert remote.calls == ["/a.png", "/a.gif"]

    def test_sync_provider_runs_off_loop_thread(self) -> None:
        class _Recording:
            def __init__(self) -> None:
                self.thread_ids: list[int] = []

            def get_size(self, src: str) -> tuple[int, int]:
                self.thread_ids.append(threading.get_ident())
                return (8, 8)

        provider = _Recording()
        assert asyncio.run(lookup_size(provider, "/a.png")) == (8, 8)
        assert provider.thread_ids != [threading.get_ident()]

    def test_sync_provider_returning_awaitable(self) -> None:
        class _Deferred:
            def get_size(self, src: str) -> object:
                async def answer() -> tuple[int, int]:
                    return (3, 4)

                return answer()

        assert asyncio.run(lookup_size(_Deferred(), "/a.png")) == (3, 4)
