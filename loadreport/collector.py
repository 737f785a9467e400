from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from loadreport.events import Event, Reporter


async def drain(queue: "asyncio.Queue[Optional[Event]]", reporters: Sequence[Reporter]) -> int:
    """
    Single writer for a set of reporters.

    Request workers put events on the queue; this coroutine is the only one
    calling add(), so the reporters need no locking. A None item stops it.
    Returns the number of events fanned out.
    """
    n = 0
    while True:
        item = await queue.get()
        try:
            if item is None:
                return n
            for r in reporters:
                r.add(item)
            n += 1
        finally:
            queue.task_done()
