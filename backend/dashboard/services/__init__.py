"""Services: form actions, authentication, and read-side queries.

Invariants:
    - Services never build HTTP responses; routes translate their results
"""
