"""Repository interface (port) for persisting search results.

This is the port in hexagonal architecture that the infrastructure layer implements.
"""
from abc import ABC, abstractmethod
from typing import List
from metrichunter.domain.models import Repository


class IRepositoryStorage(ABC):
    """Abstract interface for repository list storage."""

    @abstractmethod
    def save_repositories(self, repositories: List[Repository], path: str) -> None:
        """Save repositories so a later run can analyze them again.

        Args:
            repositories: List of Repository entities to persist
            path: Destination file
        """
        pass

    @abstractmethod
    def load_repositories(self, path: str) -> List[Repository]:
        """Load repositories previously written by save_repositories."""
        pass
