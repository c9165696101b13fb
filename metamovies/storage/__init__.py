"""Storage layer: connection pool for the hosted catalog database."""

from metamovies.storage.database import Database

__all__ = ["Database"]
