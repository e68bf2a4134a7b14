"""GitHub API interface (port) for searching repositories.

This is the anti-corruption layer that shields the domain from GitHub API specifics.
"""
from abc import ABC, abstractmethod
from metrichunter.domain.models import GitInput, GitOutput


class IGitHubClient(ABC):
    """Abstract interface for GitHub search operations."""

    @abstractmethod
    async def search_repositories(self, git_input: GitInput) -> GitOutput:
        """Search GitHub for repositories matching the criteria.

        Args:
            git_input: Language, topic, count and sort order of the search

        Returns:
            GitOutput with the repositories found and the requests that failed
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
