from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from loadreport.events import Event

T0 = datetime(2026, 1, 2, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def at():
    """Build an event whose timestamp is T0 + seconds."""

    def make(seconds: float, **kw) -> Event:
        return Event(ts=T0 + timedelta(seconds=seconds), **kw)

    return make
