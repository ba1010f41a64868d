"""Shared pytest fixtures for sizeset tests.

Provides environment-isolated configuration objects, resolvers and a
controllable preloader used across multiple test modules.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from sizeset.config import SizesetConfig
from sizeset.image import ImageResolver, ResolvedImage


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop any SIZESET_* variables from the host environment."""
    import os

    for key in list(os.environ):
        if key.startswith("SIZESET_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def default_config() -> SizesetConfig:
    """Return a SizesetConfig with all default values and no .env file."""
    return SizesetConfig(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def silent_config() -> SizesetConfig:
    """Return a config with no logging for noise-free tests."""
    return SizesetConfig(_env_file=None, log_level="none")  # type: ignore[call-arg]


@pytest.fixture
def resolver(silent_config: SizesetConfig) -> ImageResolver:
    """Return an ImageResolver on the default ipx provider."""
    return ImageResolver(silent_config)


class ControlledPreloader:
    """Test double for a browser preload: completes only when told to.

    Every call records the requested image and parks on a future that the
    test resolves or fails explicitly.
    """

    def __init__(self) -> None:
        self.requests: list[ResolvedImage] = []
        self._futures: list[asyncio.Future[Any]] = []

    async def __call__(self, image: ResolvedImage) -> Any:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.requests.append(image)
        self._futures.append(future)
        return await future

    def finish(self, event: Any, index: int = -1) -> None:
        self._futures[index].set_result(event)

    def fail(self, error: BaseException, index: int = -1) -> None:
        self._futures[index].set_exception(error)


@pytest.fixture
def preloader() -> ControlledPreloader:
    """Return a fresh ControlledPreloader."""
    return ControlledPreloader()

