"""Infrastructure — database engine, storage implementations, logging setup.

Invariants:
    - Everything here implements a core protocol or configures a process-wide concern
    - Services receive these objects by injection; they never import them directly
"""
