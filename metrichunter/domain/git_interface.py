"""Git provider interface (port) for local repository copies."""
from abc import ABC, abstractmethod
from metrichunter.domain.models import Repository


class IGitProvider(ABC):
    """Abstract interface for cloning and removing local repositories."""

    @abstractmethod
    async def clone_repository(self, repository: Repository) -> bool:
        """Clone a repository into its working directory.

        Returns:
            True if a local copy is available afterwards
        """
        pass

    @abstractmethod
    async def delete_local_repository(self, repository: Repository) -> bool:
        """Remove the local copy of a repository."""
        pass
