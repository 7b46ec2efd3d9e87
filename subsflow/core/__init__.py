"""Core — pure domain logic. No IO, no framework imports.

Invariants:
    - Modules here depend only on the standard library and each other
    - Storage is reached through repository_protocols, implemented in infrastructure/
"""
