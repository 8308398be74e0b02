"""
jcsstore Store - Content-Addressed, Append-Only JSON Store

The directory is the source of truth. There is no index.
"""

from jcsstore.store.store import Store, StoreViolation, VerifySummary

__all__ = ["Store", "StoreViolation", "VerifySummary"]
