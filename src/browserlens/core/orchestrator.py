"""Monitoring orchestrator.

Owns the set of active monitoring sessions and coordinates everything that
happens to them: event capture, periodic background analysis, on-demand
suggestions, final analysis on stop and report handoff.

Usage::

    async with MonitoringOrchestrator(load_config()) as monitor:
        session_id = monitor.start_monitoring(page, "checkout flow")
        ...  # drive the page
        suggestions = await monitor.get_realtime_suggestions(session_id)
        await monitor.stop_monitoring(session_id)
"""

from __future__ import annotations

import asyncio
import functools
import threading
import uuid
from pathlib import Path
from typing import Any

from browserlens.analysis.engine import AnalysisEngine
from browserlens.config import MonitorConfig
from browserlens.errors import (
    ConfigurationError,
    ErrorCategory,
    InstrumentationUnavailableError,
    MonitorError,
    SessionNotFoundError,
)
from browserlens.events.buffer import EventBuffer
from browserlens.events.fallback import seed_fallback_events
from browserlens.events.instrumentation import EventStream, Instrumentation, PageInstrumentation
from browserlens.providers.base import AnalysisProvider
from browserlens.providers.registry import create_provider
from browserlens.reporting.sink import JsonReportSink, ReportSink
from browserlens.types.analysis import AnalysisResult
from browserlens.types.events import BrowserEvent
from browserlens.types.session import MonitoringSession, default_session_name
from browserlens.utilities.logger import get_logger

logger = get_logger(__name__)

REALTIME_WINDOW = 20


class MonitoringOrchestrator:
    """Coordinates sessions, buffering, analysis and reporting.

    One instance per process is the expected convention; nothing here is
    global, so tests may build as many as they like.
    """

    def __init__(
        self,
        config: MonitorConfig,
        *,
        provider: AnalysisProvider | None = None,
        instrumentation: Instrumentation | None = None,
        report_sink: ReportSink | None = None,
        buffer: EventBuffer | None = None,
    ) -> None:
        self._config = config
        # Raises ConfigurationError before any state exists.
        self._provider = provider if provider is not None else create_provider(config)
        self._instrumentation = instrumentation if instrumentation is not None else PageInstrumentation()
        self._sink = report_sink if report_sink is not None else JsonReportSink(config.report_dir)
        self._buffer = buffer if buffer is not None else EventBuffer()
        self._engine = AnalysisEngine(self._provider, max_concurrent=config.max_concurrent_analyses)

        self._lock = threading.Lock()
        self._sessions: dict[str, MonitoringSession] = {}
        self._streams: dict[str, EventStream] = {}
        self._history: dict[str, MonitoringSession] = {}
        self._final_results: dict[str, AnalysisResult | None] = {}

        self._report_tasks: set[asyncio.Task[AnalysisResult | None]] = set()
        self._periodic_task: asyncio.Task[None] | None = None
        self._periodic_stop: asyncio.Event | None = None
        self._closed = False

        logger.info(
            "Monitoring orchestrator initialized",
            provider=self._provider.name,
            monitoring_enabled=config.monitoring_enabled,
            realtime=config.realtime_suggestions_enabled,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def provider(self) -> AnalysisProvider:
        return self._provider

    @property
    def engine(self) -> AnalysisEngine:
        return self._engine

    @property
    def buffer(self) -> EventBuffer:
        return self._buffer

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MonitoringOrchestrator:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.shutdown()

    async def start(self) -> None:
        """Launch the periodic analysis task when real-time suggestions are on."""
        if not self._config.monitoring_enabled:
            logger.info("Monitoring disabled by configuration")
            return
        if not self._config.realtime_suggestions_enabled:
            return
        if self._periodic_task is not None and not self._periodic_task.done():
            return

        self._periodic_stop = asyncio.Event()
        self._periodic_task = asyncio.create_task(
            self._periodic_loop(self._periodic_stop), name="browserlens-periodic-analysis",
        )
        logger.info("Periodic analysis started", interval=self._config.analysis_interval)

    async def shutdown(self) -> None:
        """Stop every session, the periodic task and pending reports, then the provider."""
        if self._closed:
            return
        self._closed = True
        logger.info("Shutting down monitoring orchestrator")

        await self.stop_all()
        await self._stop_periodic()
        await self._drain_report_tasks()

        try:
            await self._provider.close()
        except Exception:
            logger.error("Failed to close provider", provider=self._provider.name, exc_info=True)

        logger.info("Monitoring orchestrator shutdown complete")

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def start_monitoring(self, handle: Any, name: str | None = None) -> str:
        """Begin monitoring *handle*; returns the new session id.

        Raises:
            ConfigurationError: Monitoring is disabled or the handle cannot
                be monitored at all.
        """
        if not self._config.monitoring_enabled:
            raise ConfigurationError("Monitoring is disabled by configuration")
        if self._closed:
            raise MonitorError("Orchestrator has been shut down", category=ErrorCategory.SESSION)
        if not self._instrumentation.supports(handle):
            raise ConfigurationError(
                f"Cannot monitor handle of type {type(handle).__name__}: "
                "it does not support browser instrumentation"
            )

        session_id = str(uuid.uuid4())
        session = MonitoringSession(
            id=session_id,
            name=name or default_session_name(session_id),
            handle=handle,
        )
        log = logger.bind(session_id=session_id, session_name=session.name)

        self._buffer.start_session(session_id)
        stream: EventStream | None = None
        try:
            stream = self._instrumentation.attach(
                handle, session_id, functools.partial(self._buffer.append, session_id),
            )
        except InstrumentationUnavailableError as exc:
            session.degraded = True
            log.warning("Live instrumentation unavailable, using fallback events", reason=str(exc))
            seed_fallback_events(self._buffer, session_id)
        except Exception:
            self._buffer.discard(session_id)
            raise

        with self._lock:
            self._sessions[session_id] = session
            self._history[session_id] = session
            if stream is not None:
                self._streams[session_id] = stream

        log.info("Started monitoring session", degraded=session.degraded)
        return session_id

    async def stop_monitoring(self, session_id: str) -> asyncio.Task[AnalysisResult | None] | None:
        """Stop *session_id* and schedule its final analysis and report.

        Returns the final-report task, or ``None`` when the id is unknown or
        the session was already stopped.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
            stream = self._streams.pop(session_id, None)
        if session is None or not session.stop():
            logger.debug("Stop requested for unknown or stopped session", session_id=session_id)
            return None

        log = logger.bind(session_id=session_id, session_name=session.name)
        if stream is not None:
            try:
                stream.detach()
            except Exception:
                log.warning("Failed to detach instrumentation", exc_info=True)
        # Stopped sessions stay in history; release the page or driver.
        session.handle = None

        self._buffer.stop_session(session_id)
        events = self._buffer.all(session_id)
        log.info("Stopped monitoring session", events=len(events))

        task = asyncio.create_task(
            self._finalize_session(session, events),
            name=f"browserlens-final-{session_id[:8]}",
        )
        self._report_tasks.add(task)
        task.add_done_callback(self._report_tasks.discard)
        return task

    async def stop_all(self) -> list[asyncio.Task[AnalysisResult | None]]:
        """Stop every active session; returns the scheduled final-report tasks."""
        with self._lock:
            session_ids = list(self._sessions)
        tasks = []
        for session_id in session_ids:
            task = await self.stop_monitoring(session_id)
            if task is not None:
                tasks.append(task)
        return tasks

    def get_session(self, session_id: str) -> MonitoringSession | None:
        """Any session this orchestrator has started, active or stopped."""
        with self._lock:
            return self._history.get(session_id)

    def active_sessions(self) -> list[MonitoringSession]:
        with self._lock:
            return list(self._sessions.values())

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    async def get_realtime_suggestions(self, session_id: str) -> AnalysisResult:
        """Analyze the most recent events of an active session."""
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            return AnalysisResult.failed(str(SessionNotFoundError(session_id)))
        events = self._buffer.recent(session_id, REALTIME_WINDOW)
        return await self._engine.analyze(events, session)

    async def run_periodic_analysis(self) -> dict[str, AnalysisResult]:
        """Run one periodic tick over every active session with events.

        A failure for one session is logged and does not affect the others.
        """
        batch_size = self._config.batch_size
        batches: list[tuple[MonitoringSession, tuple[BrowserEvent, ...]]] = []
        for session in self.active_sessions():
            events = self._buffer.recent(session.id, batch_size)
            if events:
                batches.append((session, events))
        if not batches:
            return {}

        outcomes = await asyncio.gather(
            *(self._engine.analyze(events, session) for session, events in batches),
            return_exceptions=True,
        )

        results: dict[str, AnalysisResult] = {}
        for (session, events), outcome in zip(batches, outcomes):
            log = logger.bind(session_id=session.id, session_name=session.name)
            if isinstance(outcome, BaseException):
                log.error("Periodic analysis raised", error=repr(outcome))
                continue
            results[session.id] = outcome
            if outcome.has_error:
                log.warning("Periodic analysis failed", error=outcome.error_message)
            elif outcome.has_issues:
                log.info(
                    "Periodic analysis found issues",
                    events=len(events),
                    issues=len(outcome.issues),
                    critical=outcome.critical_issue_count,
                    high=outcome.high_priority_issue_count,
                )
            else:
                log.debug("Periodic analysis found no issues", events=len(events))
        return results

    async def generate_report(self) -> Path | None:
        """Write the cross-session report for every session seen so far.

        Stopped sessions are kept until :meth:`prune_history` is called, so
        long-running processes should prune after each report.
        """
        with self._lock:
            sessions = list(self._history.values())
            analyses = dict(self._final_results)
        try:
            return await asyncio.to_thread(self._sink.write_comprehensive, sessions, analyses)
        except Exception:
            logger.error("Report sink failed to write comprehensive report", exc_info=True)
            return None

    def prune_history(self) -> int:
        """Forget stopped sessions whose final report has been written.

        Returns the number of sessions removed.
        """
        with self._lock:
            done = [
                sid for sid, session in self._history.items()
                if not session.is_active and sid in self._final_results
            ]
            for sid in done:
                del self._history[sid]
                del self._final_results[sid]
        if done:
            logger.debug("Pruned session history", sessions=len(done))
        return len(done)

    def get_monitoring_stats(self) -> dict[str, Any]:
        with self._lock:
            active = len(self._sessions)
        return {
            "active_sessions": active,
            "total_events_collected": self._buffer.total_count(),
            "analysis_queue_size": self._engine.in_flight,
            "provider": self._provider.name,
            "monitoring_enabled": self._config.monitoring_enabled,
            "pending_reports": len(self._report_tasks),
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _periodic_loop(self, stop: asyncio.Event) -> None:
        interval = self._config.analysis_interval
        while True:
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
                return
            except TimeoutError:
                pass
            try:
                await self.run_periodic_analysis()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.error("Periodic analysis tick failed", exc_info=True)

    async def _stop_periodic(self) -> None:
        task = self._periodic_task
        if task is None:
            return
        self._periodic_task = None
        if self._periodic_stop is not None:
            self._periodic_stop.set()
        _, pending = await asyncio.wait({task}, timeout=self._config.shutdown_timeout)
        if pending:
            logger.warning("Periodic analysis did not stop in time, cancelling")
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def _drain_report_tasks(self) -> None:
        tasks = set(self._report_tasks)
        if not tasks:
            return
        _, pending = await asyncio.wait(tasks, timeout=self._config.shutdown_timeout)
        if pending:
            logger.warning("Cancelling unfinished final analyses", count=len(pending))
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

    async def _finalize_session(
        self,
        session: MonitoringSession,
        events: tuple[BrowserEvent, ...],
    ) -> AnalysisResult | None:
        log = logger.bind(session_id=session.id, session_name=session.name)
        analysis: AnalysisResult | None = None
        try:
            analysis = await self._engine.analyze(events, session)
        except asyncio.CancelledError:
            log.warning("Final analysis cancelled, writing report without findings")
            raise
        finally:
            with self._lock:
                self._final_results[session.id] = analysis
            findings = analysis if analysis is not None and not analysis.has_error else None
            try:
                await self._deliver_session_report(session, events, findings)
            finally:
                self._buffer.discard(session.id)

        if analysis.has_error:
            log.warning("Final analysis failed, report written without findings", error=analysis.error_message)
        else:
            log.info(
                "Final analysis complete",
                issues=len(analysis.issues),
                severity=str(analysis.severity),
            )
        return analysis

    async def _deliver_session_report(
        self,
        session: MonitoringSession,
        events: tuple[BrowserEvent, ...],
        analysis: AnalysisResult | None,
    ) -> None:
        # Serialising a long session blocks; keep it off the event loop.
        try:
            await asyncio.to_thread(self._sink.write_session, session, events, analysis)
        except Exception:
            logger.error(
                "Report sink failed to write session report",
                session_id=session.id,
                exc_info=True,
            )
