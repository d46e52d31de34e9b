"""Ownership store adapters."""

from usagegate.adapters.ownership_store.in_memory import InMemoryOwnershipStore
from usagegate.adapters.ownership_store.postgres import PostgresOwnershipStore

__all__ = ["InMemoryOwnershipStore", "PostgresOwnershipStore"]
