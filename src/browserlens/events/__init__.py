"""Event capture: buffering, instrumentation adapters and fallback events."""

from browserlens.events.buffer import EventBuffer
from browserlens.events.fallback import is_synthetic, seed_fallback_events, synthetic_events
from browserlens.events.instrumentation import (
    EventStream,
    Instrumentation,
    NullInstrumentation,
    PageEventStream,
    PageInstrumentation,
)

__all__ = [
    "EventBuffer",
    "EventStream",
    "Instrumentation",
    "NullInstrumentation",
    "PageEventStream",
    "PageInstrumentation",
    "is_synthetic",
    "seed_fallback_events",
    "synthetic_events",
]
