"""Placeholder preload state machine.

A placeholder-enabled image slot moves through::

    IDLE -> PLACEHOLDER_SHOWN -> LOADING -> LOADED
                                        \\-> FAILED

On update the slot immediately exposes a tiny low-quality image with no
``sizes`` attribute, then resolves the full-resolution target and hands it
to an external preloader. When the preload completes the visible image is
replaced by the target in a single assignment and exactly one
:class:`LoadSignal` is emitted.

Each update starts a new session with a monotonically increasing id. A
superseded session is abandoned: its preload keeps running (the network
request is not aborted) but its completion is ignored.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from sizeset.exceptions import PreloadError, SizesetError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sizeset.image import ImageRequest, ImageResolver, ResolvedImage

    # Starts loading the image and resolves with the native load event.
    Preloader = Callable[[ResolvedImage], Awaitable[Any]]

logger = logging.getLogger("sizeset")


class PlaceholderState(str, Enum):
    """Lifecycle states of a placeholder session."""

    IDLE = "idle"
    PLACEHOLDER_SHOWN = "placeholder_shown"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"
    ABANDONED = "abandoned"


_RANK: dict[PlaceholderState, int] = {
    PlaceholderState.IDLE: 0,
    PlaceholderState.PLACEHOLDER_SHOWN: 1,
    PlaceholderState.LOADING: 2,
    PlaceholderState.LOADED: 3,
    PlaceholderState.FAILED: 3,
    PlaceholderState.ABANDONED: 3,
}


@dataclass(frozen=True, slots=True)
class LoadSignal:
    """Completion signal of a placeholder session.

    Attributes:
        session_id: Id of the session that completed.
        event: The native load event reported by the preloader.
        image: The full-resolution image now visible.
    """

    session_id: int
    event: Any
    image: ResolvedImage


class PlaceholderSession:
    """One placeholder-to-final swap for one image slot.

    States only move forward; a session never returns to an earlier state.
    Its completion future resolves at most once: with a LoadSignal, with a
    SizesetError (PreloadError for load failures), or by cancellation when
    the session is abandoned.
    """

    def __init__(self, session_id: int, placeholder: ResolvedImage) -> None:
        self.session_id = session_id
        self.placeholder = placeholder
        self.target: ResolvedImage | None = None
        self._state = PlaceholderState.IDLE
        self._completion: asyncio.Future[LoadSignal] = asyncio.get_running_loop().create_future()
        # Failures are also delivered to error listeners; mark them retrieved.
        self._completion.add_done_callback(lambda f: f.cancelled() or f.exception())

    @property
    def state(self) -> PlaceholderState:
        return self._state

    @property
    def loaded(self) -> bool:
        return self._state is PlaceholderState.LOADED

    @property
    def placeholder_url(self) -> str:
        return self.placeholder.default_url

    @property
    def target_url(self) -> str | None:
        return self.target.default_url if self.target is not None else None

    @property
    def done(self) -> bool:
        return self._completion.done()

    async def wait(self) -> LoadSignal:
        """Wait for the session's completion signal.

        Raises:
            PreloadError: If the preload failed.
            SizesetError: If the target could not be resolved.
            asyncio.CancelledError: If the session was abandoned.
        """
        return await asyncio.shield(self._completion)

    def advance(self, state: PlaceholderState) -> None:
        """Move to *state*, refusing backwards or repeated terminal transitions."""
        if _RANK[state] <= _RANK[self._state]:
            raise RuntimeError(
                f"Session {self.session_id}: illegal transition {self._state.value} -> {state.value}"
            )
        logger.debug("Placeholder session %d: %s -> %s", self.session_id, self._state.value, state.value)
        self._state = state

    def complete(self, signal: LoadSignal) -> None:
        self.target = signal.image
        self.advance(PlaceholderState.LOADED)
        self._completion.set_result(signal)

    def fail(self, error: SizesetError) -> None:
        self.advance(PlaceholderState.FAILED)
        self._completion.set_exception(error)

    def abandon(self) -> None:
        if self._completion.done():
            return
        self.advance(PlaceholderState.ABANDONED)
        self._completion.cancel()


class ImageSlot:
    """A single rendered image whose inputs may change over time.

    Every :meth:`update` replaces the whole visible value. With a
    placeholder requested, the swap to the full image happens once the
    preloader reports the load. Readers of :attr:`visible` always see a
    complete ResolvedImage, either the placeholder or the final one.

    Args:
        resolver: Resolver producing placeholder and target images.
        preloader: Async callable that loads a ResolvedImage out of band and
            returns the native load event, raising on failure.
    """

    def __init__(self, resolver: ImageResolver, preloader: Preloader) -> None:
        self._resolver = resolver
        self._preloader = preloader
        self._session_ids = itertools.count(1)
        self._session: PlaceholderSession | None = None
        self._visible: ResolvedImage | None = None
        self._load_listeners: list[Callable[[LoadSignal], None]] = []
        self._error_listeners: list[Callable[[SizesetError], None]] = []
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def visible(self) -> ResolvedImage | None:
        """The image the rendering layer should currently show."""
        return self._visible

    @property
    def session(self) -> PlaceholderSession | None:
        """The active placeholder session, if any."""
        return self._session

    @property
    def state(self) -> PlaceholderState:
        if self._session is not None:
            return self._session.state
        return PlaceholderState.LOADED if self._visible is not None else PlaceholderState.IDLE

    def on_load(self, listener: Callable[[LoadSignal], None]) -> None:
        """Subscribe to completion signals of this slot's sessions."""
        self._load_listeners.append(listener)

    def on_error(self, listener: Callable[[SizesetError], None]) -> None:
        """Subscribe to failures of this slot's sessions.

        Listeners receive a PreloadError when loading failed, or the
        resolution error when the full-resolution target could not be built.
        """
        self._error_listeners.append(listener)

    def update(self, request: ImageRequest, overrides: dict[str, Any] | None = None) -> ResolvedImage:
        """Replace the slot's inputs and return the image to show right now.

        The request is validated first; an invalid one raises and leaves the
        slot untouched. Otherwise any in-flight session is abandoned. Without
        a placeholder the full image is resolved synchronously. With one, a
        new session starts and must run inside an event loop.

        Raises:
            MalformedDescriptorError: If ``request.sizes`` cannot be tokenized.
            UnknownBreakpointError: If the descriptor names an unknown key.
            ConfigValidationError: If overrides or the preset are invalid.
            RuntimeError: If a placeholder is requested outside a running loop.
        """
        self._resolver.validate(request, overrides)
        placeholder = self._resolver.resolve_placeholder(request, overrides)
        if placeholder is None:
            image = self._resolver.resolve(request, overrides)
            self._abandon()
            self._visible = image
            return image

        loop = asyncio.get_running_loop()
        self._abandon()

        session = PlaceholderSession(next(self._session_ids), placeholder)
        self._session = session
        session.advance(PlaceholderState.PLACEHOLDER_SHOWN)
        self._visible = placeholder

        task = loop.create_task(self._preload(session, request, overrides))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return placeholder

    def close(self) -> None:
        """Abandon the active session; late completions are ignored."""
        self._abandon()

    def _abandon(self) -> None:
        if self._session is not None and not self._session.done:
            logger.debug("Abandoning placeholder session %d", self._session.session_id)
            self._session.abandon()
        self._session = None

    async def _preload(
        self,
        session: PlaceholderSession,
        request: ImageRequest,
        overrides: dict[str, Any] | None,
    ) -> None:
        if session is not self._session:
            return
        session.advance(PlaceholderState.LOADING)
        try:
            target = await self._resolver.resolve_async(request, overrides)
        except SizesetError as exc:
            self._fail(session, exc)
            return

        session.target = target
        try:
            event = await self._preloader(target)
        except PreloadError as exc:
            self._fail(session, exc)
            return
        except Exception as exc:
            error = PreloadError(f"Preload of {request.src} failed: {exc}")
            error.__cause__ = exc
            self._fail(session, error)
            return

        self._complete(session, LoadSignal(session.session_id, event, target))

    def _complete(self, session: PlaceholderSession, signal: LoadSignal) -> None:
        if session is not self._session:
            logger.debug("Ignoring completion of abandoned session %d", session.session_id)
            return
        session.complete(signal)
        self._visible = signal.image
        _notify(self._load_listeners, signal)

    def _fail(self, session: PlaceholderSession, error: SizesetError) -> None:
        if session is not self._session:
            logger.debug("Ignoring failure of abandoned session %d", session.session_id)
            return
        logger.warning("Placeholder session %d: %s", session.session_id, error)
        session.fail(error)
        _notify(self._error_listeners, error)


def _notify(listeners: list[Callable[[Any], None]], value: Any) -> None:
    """Call every listener with *value*; a raising listener is logged and skipped."""
    for listener in list(listeners):
        try:
            listener(value)
        except Exception:
            logger.exception("Placeholder listener %r raised", listener)
