"""Core Layer — the IndexedMap container and its pure helpers, no IO.

Invariants:
    - No module in core/ imports from config, infrastructure/, or __main__
    - Every operation returns a new value; no instance is mutated after construction

Design Decisions:
    - Functional core separated from the thin shell (logging setup, settings, demo)
"""
