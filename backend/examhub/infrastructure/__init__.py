"""Infrastructure Layer — remote store client and logging setup.

Invariants:
    - Remote failures leave this layer only as RemoteStoreError
"""
