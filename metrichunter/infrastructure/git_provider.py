"""Git provider cloning repositories into the language scoped layout."""
import logging
import os
import shutil
import stat
from pathlib import Path
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)
from metrichunter.domain.exceptions import CloneError
from metrichunter.domain.git_interface import IGitProvider
from metrichunter.domain.models import Repository
from metrichunter.domain.process_interface import IProcessRunner
from metrichunter.infrastructure.path_resolver import PathResolver, REPOSITORIES_DIR


logger = logging.getLogger(__name__)


class GitProvider(IGitProvider):
    """Clones repositories with the git command line client.

    Clones land in <language>/Repositories/<owner>/<name>, which is the
    source directory the SourceMonitor command files point at.
    """

    def __init__(
        self,
        process_runner: IProcessRunner,
        path_resolver: PathResolver,
        git_executable: str = "git",
        clone_depth: int = 1
    ):
        """Initialize git provider.

        Args:
            process_runner: Runner used to start git
            path_resolver: Resolver for the language scoped directories
            git_executable: Name or path of the git executable
            clone_depth: History depth of the clone, 0 for a full clone
        """
        self._process_runner = process_runner
        self._paths = path_resolver
        self._git = git_executable
        self._clone_depth = clone_depth

    def local_path(self, repository: Repository) -> Path:
        return self._paths.build_path(repository.language, REPOSITORIES_DIR, repository.full_name)

    async def clone_repository(self, repository: Repository) -> bool:
        """Clone a repository, reusing an existing local copy.

        Returns:
            True if the repository is available locally, False if cloning failed
        """
        target = self.local_path(repository)
        if target.is_dir() and any(target.iterdir()):
            logger.info(f"Repository {repository.full_name} already cloned. Skipping...")
            return True

        self._paths.build_and_create_path(repository.language, REPOSITORIES_DIR, repository.owner)
        try:
            await self._clone(repository, target)
        except (CloneError, OSError) as e:
            logger.error(f"Error cloning {repository.full_name}: {e}")
            self._remove_directory(target)
            return False

        logger.info(f"Cloned {repository.full_name} into {target}")
        return True

    @retry(
        retry=retry_if_exception_type(CloneError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True
    )
    async def _clone(self, repository: Repository, target: Path) -> None:
        """Run git clone once.

        Raises:
            CloneError: When git exits with a nonzero code
        """
        # A failed attempt may leave a partial checkout behind
        self._remove_directory(target)

        arguments = ["clone"]
        if self._clone_depth > 0:
            arguments += ["--depth", str(self._clone_depth)]
        arguments += [self._clone_url(repository), str(target)]

        result = await self._process_runner.run(self._git, arguments)
        if result.exit_code != 0:
            raise CloneError(
                f"git clone exited with code {result.exit_code}: {result.output.strip()}",
                repo_url=repository.url,
                exit_code=result.exit_code
            )

    @staticmethod
    def _clone_url(repository: Repository) -> str:
        if repository.url:
            return repository.url if repository.url.endswith(".git") else f"{repository.url}.git"
        return f"https://github.com/{repository.full_name}.git"

    async def delete_local_repository(self, repository: Repository) -> bool:
        """Remove the local clone of a repository.

        Returns:
            True if no local copy remains
        """
        target = self.local_path(repository)
        if not target.exists():
            return True
        removed = self._remove_directory(target)
        if removed:
            logger.info(f"Deleted local copy of {repository.full_name}")
        return removed

    @staticmethod
    def _remove_directory(directory: Path) -> bool:
        if not directory.exists():
            return True

        # Git marks object files read-only, which rmtree refuses on Windows
        def handle_remove_readonly(func, path, exc):
            if os.path.exists(path):
                os.chmod(path, stat.S_IWRITE)
                func(path)

        try:
            shutil.rmtree(directory, onerror=handle_remove_readonly)
            return True
        except OSError as e:
            logger.warning(f"Failed to remove directory {directory}: {e}")
            return False
