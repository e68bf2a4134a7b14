"""Hunter service orchestrating search, cloning and metric calculation."""
import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence, Set
from metrichunter.application.metric_calculator_manager import MetricCalculatorManager, map_language
from metrichunter.application.metrics_csv import metrics_to_csv, to_dictionary_list_by_topics
from metrichunter.domain.exceptions import EmptySelectionError
from metrichunter.domain.git_interface import IGitProvider
from metrichunter.domain.github_interface import IGitHubClient
from metrichunter.domain.models import GitInput, GitOutput, HuntResult, Repository
from metrichunter.domain.repository_interface import IRepositoryStorage


logger = logging.getLogger(__name__)


def repository_listing(repositories: Sequence[Repository]) -> List[str]:
    """One display line per repository: name, stars, size and license."""
    return [
        f"{repo.full_name} ({repo.language or 'unknown'}) - {repo.star_count} stars, "
        f"{repo.size_string}, {repo.license_display}"
        for repo in repositories
    ]


class HunterService:
    """Application service for hunting repository metrics.

    Orchestrates the interaction between GitHub search, local clones and
    the metric calculators. Repositories are processed one at a time; the
    analysis tool must never run twice concurrently.
    """

    def __init__(
        self,
        github_client: IGitHubClient,
        git_provider: IGitProvider,
        calculator_manager: MetricCalculatorManager,
        storage: IRepositoryStorage
    ):
        """Initialize hunter service.

        Args:
            github_client: GitHub search client implementation
            git_provider: Clones and removes local repositories
            calculator_manager: Registry of metric calculators
            storage: Repository list storage implementation
        """
        self._github_client = github_client
        self._git_provider = git_provider
        self._calculator_manager = calculator_manager
        self._storage = storage

    def supported_languages(self) -> Set[str]:
        return self._calculator_manager.supported_languages()

    async def search_repositories(self, git_input: GitInput) -> GitOutput:
        """Search GitHub and report requests that failed."""
        git_output = await self._github_client.search_repositories(git_input)
        for request in git_output.failed_requests:
            logger.warning(f"Search request failed and was not retried: {request.query}")
        return git_output

    def save_repositories(self, repositories: Sequence[Repository], path: str) -> None:
        self._storage.save_repositories(list(repositories), path)

    def load_repositories(self, path: str) -> List[Repository]:
        return self._storage.load_repositories(path)

    async def download_repositories(self, selection: Sequence[Repository]) -> int:
        """Clone the selected repositories.

        Returns:
            Number of repositories available locally afterwards
        """
        self._check_selection(selection)
        cloned = 0
        for repository in selection:
            if await self._git_provider.clone_repository(self._tagged(repository)):
                cloned += 1
        logger.info(f"Downloaded {cloned}/{len(selection)} repositories")
        return cloned

    async def calculate_metrics(
        self,
        selection: Sequence[Repository],
        cancel_event: Optional[asyncio.Event] = None
    ) -> HuntResult:
        """Calculate metrics for repositories that are already cloned.

        Args:
            selection: Repositories to analyze
            cancel_event: Set to stop before the next repository

        Returns:
            HuntResult with the CSV export and operation statistics

        Raises:
            EmptySelectionError: If nothing was selected
        """
        self._check_selection(selection)
        return await self._run(selection, clone=False, cancel_event=cancel_event)

    async def hunt_repositories(
        self,
        selection: Sequence[Repository],
        cancel_event: Optional[asyncio.Event] = None
    ) -> HuntResult:
        """Clone, analyze and delete each selected repository.

        Repositories that cannot be cloned are skipped. Reports stay on
        disk after the clone is deleted.

        Raises:
            EmptySelectionError: If nothing was selected
        """
        self._check_selection(selection)
        return await self._run(selection, clone=True, cancel_event=cancel_event)

    async def _run(
        self,
        selection: Sequence[Repository],
        clone: bool,
        cancel_event: Optional[asyncio.Event]
    ) -> HuntResult:
        start_time = time.time()
        rows: List[Dict[str, str]] = []
        analyzed = 0
        skipped = 0
        failed = 0

        logger.info(f"Starting metric calculation for {len(selection)} repositories")

        for repository in selection:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Metric calculation cancelled")
                skipped += 1
                continue

            repository = self._tagged(repository)

            if clone and not await self._git_provider.clone_repository(repository):
                logger.warning(f"Skipping {repository.full_name}: clone failed")
                skipped += 1
                continue

            try:
                calculator = self._calculator_manager.find_calculator(repository.language)
                metrics = await calculator.calculate_metrics(repository, cancel_event)
                if not metrics:
                    skipped += 1
                else:
                    rows.extend(to_dictionary_list_by_topics(repository, metrics))
                    analyzed += 1
            except Exception as e:
                # Don't fail entire batch for one repository
                logger.error(f"Error calculating metrics for {repository.full_name}: {e}")
                failed += 1
            finally:
                if clone:
                    await self._git_provider.delete_local_repository(repository)

        duration = time.time() - start_time
        result = HuntResult(
            csv=metrics_to_csv(rows),
            repositories_analyzed=analyzed,
            repositories_skipped=skipped,
            repositories_failed=failed,
            duration_seconds=duration
        )

        logger.info(
            f"Metric calculation completed in {duration:.2f} seconds: {analyzed} analyzed, "
            f"{skipped} skipped, {failed} failed"
        )
        return result

    @staticmethod
    def _tagged(repository: Repository) -> Repository:
        language = map_language(repository.language)
        if language == repository.language:
            return repository
        return repository.with_language(language)

    @staticmethod
    def _check_selection(selection: Sequence[Repository]) -> None:
        if not selection:
            logger.error("No repositories selected")
            raise EmptySelectionError()

    async def close(self) -> None:
        """Close connections."""
        await self._github_client.close()
