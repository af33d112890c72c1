"""Core Layer — domain vocabulary, errors, envelope, identity and access policy.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - No IO and no async: every function here is pure
"""
