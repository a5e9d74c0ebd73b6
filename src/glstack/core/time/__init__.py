"""Time operations abstraction for testing."""

from glstack.core.time.abc import Time
from glstack.core.time.fake import FakeTime
from glstack.core.time.real import RealTime

__all__ = ["FakeTime", "RealTime", "Time"]
