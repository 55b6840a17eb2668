"""Core Layer: pure domain types, errors, and form validation.

Invariants:
    - Nothing in core/ performs I/O
"""
