"""JSON file implementation of repository storage."""
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List
from metrichunter.domain.exceptions import ConfigurationError
from metrichunter.domain.models import Repository
from metrichunter.domain.repository_interface import IRepositoryStorage


logger = logging.getLogger(__name__)


class JsonRepositoryStorage(IRepositoryStorage):
    """Stores search results as a JSON array of repositories.

    Lets a search be reviewed and then analyzed in a later run.
    """

    def save_repositories(self, repositories: List[Repository], path: str) -> None:
        """Write repositories to a JSON file.

        Raises:
            ConfigurationError: If there is nothing to save or no path given
        """
        if not repositories:
            raise ConfigurationError("No repositories found for save.")
        if not path:
            raise ConfigurationError("No file selected")

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(target, "w", encoding="utf-8") as f:
                json.dump([asdict(repo) for repo in repositories], f, indent=2)
        except OSError as e:
            logger.error(f"Error saving repositories to {path}: {e}")
            raise

        logger.info(f"Saved {len(repositories)} repositories to {path}")

    def load_repositories(self, path: str) -> List[Repository]:
        """Read repositories from a JSON file.

        Raises:
            ConfigurationError: If no path is given
            FileNotFoundError: If the file does not exist
        """
        if not path:
            raise ConfigurationError("No file selected")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        repositories = [Repository(**item) for item in data]
        logger.info(f"Loaded {len(repositories)} repositories from {path}")
        return repositories
