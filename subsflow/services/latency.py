"""Simulated Latency — the suspension point every service operation awaits.

Invariants:
    - ms <= 0 returns without suspending
    - The sleep is the cancellation point: a cancelled caller stops here,
      before any state is touched
"""

import asyncio


async def simulate_latency(ms: int) -> None:
    if ms > 0:
        await asyncio.sleep(ms / 1000)
