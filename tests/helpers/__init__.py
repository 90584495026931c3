"""Shared test helpers for the browserlens test suite."""

from __future__ import annotations

from tests.helpers.fixtures import BareHandle, FakePage, RecordingSink, findings_reply

__all__ = ["BareHandle", "FakePage", "RecordingSink", "findings_reply"]
