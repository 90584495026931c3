"""Analysis engine.

Builds a prompt from an event batch, asks the provider for findings and
parses the reply. Every failure is converted into a failed
:class:`AnalysisResult`; nothing raised by the provider or the parser
escapes :meth:`AnalysisEngine.analyze`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from browserlens.analysis.parser import parse_analysis_response
from browserlens.analysis.prompts import DEFAULT_DETAIL_LIMIT, SYSTEM_PROMPT, build_analysis_prompt
from browserlens.errors import AnalysisError, MonitorError
from browserlens.providers.base import AnalysisProvider
from browserlens.types.analysis import AnalysisResult
from browserlens.types.events import BrowserEvent
from browserlens.types.session import MonitoringSession
from browserlens.utilities.logger import get_logger

logger = get_logger(__name__)


class AnalysisEngine:
    """Runs event analyses on a bounded pool of concurrent provider calls."""

    def __init__(
        self,
        provider: AnalysisProvider,
        *,
        max_concurrent: int = 2,
        detail_limit: int = DEFAULT_DETAIL_LIMIT,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._provider = provider
        self._detail_limit = detail_limit
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._in_flight = 0
        self._completed = 0
        self._failed = 0

    @property
    def provider(self) -> AnalysisProvider:
        return self._provider

    @property
    def in_flight(self) -> int:
        """Analyses entered but not finished, including those waiting for a slot."""
        return self._in_flight

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def failed(self) -> int:
        return self._failed

    async def analyze(
        self,
        events: Sequence[BrowserEvent],
        session: MonitoringSession,
    ) -> AnalysisResult:
        """Analyze *events* for *session*.

        Returns an empty successful result without calling the provider
        when *events* is empty.
        """
        if not events:
            return AnalysisResult.empty("No events to analyze", session)

        log = logger.bind(session_id=session.id, session_name=session.name)
        self._in_flight += 1
        try:
            async with self._semaphore:
                prompt = build_analysis_prompt(events, session.name, detail_limit=self._detail_limit)
                reply = await self._provider.analyze(prompt, SYSTEM_PROMPT)
                result = parse_analysis_response(reply, session)
        except asyncio.CancelledError:
            self._failed += 1
            raise
        except AnalysisError as exc:
            self._failed += 1
            log.error("Failed to parse analysis response", error=str(exc))
            return AnalysisResult.failed(f"Failed to parse analysis response: {exc}", session)
        except MonitorError as exc:
            self._failed += 1
            log.error("Analysis failed", error=str(exc), category=str(exc.category))
            return AnalysisResult.failed(f"Analysis failed: {exc}", session)
        except Exception as exc:
            self._failed += 1
            log.error("Analysis failed unexpectedly", error=str(exc), exc_info=True)
            return AnalysisResult.failed(f"Analysis failed: {exc}", session)
        finally:
            self._in_flight -= 1

        self._completed += 1
        log.debug(
            "Analysis completed",
            events=len(events),
            issues=len(result.issues),
            severity=str(result.severity),
        )
        return result
