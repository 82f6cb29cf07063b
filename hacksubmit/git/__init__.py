"""Git helpers for fetching the repository being submitted."""

from .fetcher import CloneError, RepositoryFetcher

__all__ = ["CloneError", "RepositoryFetcher"]
