"""Infrastructure Layer: database, logging, page cache, credentials provider.

Invariants:
    - Infrastructure never imports from services/
"""
