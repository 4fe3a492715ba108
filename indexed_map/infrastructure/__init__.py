"""Infrastructure Layer — cross-cutting concerns around the core (logging setup).

Invariants:
    - Infrastructure never imports from core/ domain logic
"""
