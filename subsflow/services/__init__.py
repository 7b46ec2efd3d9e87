"""Services — stateful orchestration over core logic and injected stores.

Invariants:
    - Services raise SubsFlowError subclasses; they never return error dicts
    - Each service serializes its own check-then-write sequences with an asyncio.Lock
    - Wiring lives in platform.py only
"""
