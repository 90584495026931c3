"""Browser instrumentation adapters.

An instrumentation adapter turns an automation handle into a live stream of
:class:`BrowserEvent` objects pushed through an ``emit`` callback. The
orchestrator only depends on the :class:`Instrumentation` protocol; the
default :class:`PageInstrumentation` understands Playwright-style page
objects (``page.on(event, callback)``) without importing Playwright.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from browserlens.errors import InstrumentationUnavailableError
from browserlens.types.events import BrowserEvent

logger = logging.getLogger(__name__)

EmitFn = Callable[[BrowserEvent], Any]


@runtime_checkable
class EventStream(Protocol):
    """Live event subscription; delivery stops after :meth:`detach`."""

    def detach(self) -> None: ...


@runtime_checkable
class Instrumentation(Protocol):
    """Capability: produce live events for an automation handle."""

    def supports(self, handle: Any) -> bool:
        """Whether *handle* can be monitored at all (live or fallback)."""
        ...

    def attach(self, handle: Any, session_id: str, emit: EmitFn) -> EventStream:
        """Start delivering events for *handle*.

        Raises:
            InstrumentationUnavailableError: Live events are not available
                for this handle; callers fall back to synthetic events.
        """
        ...


class NullInstrumentation:
    """Instrumentation that never attaches; every session uses fallback events."""

    def supports(self, handle: Any) -> bool:
        return handle is not None

    def attach(self, handle: Any, session_id: str, emit: EmitFn) -> EventStream:
        raise InstrumentationUnavailableError(
            "Live instrumentation is disabled", handle_type=type(handle).__name__,
        )


# ---------------------------------------------------------------------------
# Playwright-style page adapter
# ---------------------------------------------------------------------------


def _value(obj: Any, name: str, default: Any = None) -> Any:
    """Read a property that some bindings expose as a method."""
    value = getattr(obj, name, default)
    if callable(value):
        try:
            value = value()
        except Exception:
            return default
    return value


class PageEventStream:
    """Listener set registered on one page."""

    def __init__(self, handle: Any, session_id: str) -> None:
        self._handle = handle
        self._session_id = session_id
        self._listeners: list[tuple[str, Callable[[Any], None]]] = []
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def listen(self, event_name: str, callback: Callable[[Any], None]) -> None:
        self._handle.on(event_name, callback)
        self._listeners.append((event_name, callback))

    def detach(self) -> None:
        if not self._active:
            return
        self._active = False
        remove = getattr(self._handle, "remove_listener", None)
        if callable(remove):
            for event_name, callback in self._listeners:
                try:
                    remove(event_name, callback)
                except Exception as exc:
                    logger.debug("Failed to remove %s listener: %s", event_name, exc)
        self._listeners.clear()
        logger.debug("Detached page instrumentation for session %s", self._session_id)


class PageInstrumentation:
    """Adapter for page objects with ``on(event, callback)`` subscriptions.

    Captured page events:

    - ``console`` -> console event at the message's level
    - ``pageerror`` -> script exception with stack trace
    - ``response`` -> network event (``ERROR`` level for status >= 400)
    - ``requestfailed`` -> network failure
    """

    def supports(self, handle: Any) -> bool:
        if handle is None:
            return False
        return not bool(_value(handle, "is_closed", False))

    def attach(self, handle: Any, session_id: str, emit: EmitFn) -> EventStream:
        if not callable(getattr(handle, "on", None)):
            raise InstrumentationUnavailableError(
                f"{type(handle).__name__} does not expose live event subscriptions",
                handle_type=type(handle).__name__,
            )

        stream = PageEventStream(handle, session_id)

        def guarded(build: Callable[[Any], BrowserEvent]) -> Callable[[Any], None]:
            def callback(payload: Any) -> None:
                if not stream.active:
                    return
                try:
                    emit(build(payload))
                except Exception as exc:
                    logger.debug("Error processing page event for session %s: %s", session_id, exc)
            return callback

        stream.listen("console", guarded(lambda msg: self._console_event(session_id, msg)))
        stream.listen("pageerror", guarded(lambda err: self._exception_event(session_id, err)))
        stream.listen("response", guarded(lambda resp: self._response_event(session_id, resp)))
        stream.listen("requestfailed", guarded(lambda req: self._failure_event(session_id, req)))

        logger.info("Attached page instrumentation for session %s", session_id)
        return stream

    # ------------------------------------------------------------------
    # Payload conversion
    # ------------------------------------------------------------------

    @staticmethod
    def _console_event(session_id: str, msg: Any) -> BrowserEvent:
        location = _value(msg, "location") or {}
        source = location.get("url") if isinstance(location, dict) else None
        return BrowserEvent.console_log(
            session_id,
            str(_value(msg, "type", "log")).upper(),
            str(_value(msg, "text", msg)),
            source or "unknown",
        )

    @staticmethod
    def _exception_event(session_id: str, error: Any) -> BrowserEvent:
        message = _value(error, "message") or str(error)
        return BrowserEvent.script_exception(session_id, str(message), _value(error, "stack"))

    @staticmethod
    def _response_event(session_id: str, response: Any) -> BrowserEvent:
        duration_ms = 0.0
        timing = _value(_value(response, "request"), "timing")
        if isinstance(timing, dict):
            duration_ms = max(0.0, float(timing.get("responseEnd", 0) or 0))
        return BrowserEvent.network_request(
            session_id,
            str(_value(response, "url", "")),
            int(_value(response, "status", 0) or 0),
            duration_ms,
        )

    @staticmethod
    def _failure_event(session_id: str, request: Any) -> BrowserEvent:
        failure = _value(request, "failure")
        if isinstance(failure, dict):
            failure = failure.get("errorText")
        return BrowserEvent.network_failure(
            session_id,
            str(_value(request, "url", "")),
            str(failure or "unknown error"),
        )
