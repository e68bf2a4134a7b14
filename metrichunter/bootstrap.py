"""Wiring of infrastructure components into the hunter service."""
from typing import Tuple
from metrichunter.application.hunter_service import HunterService
from metrichunter.application.metric_calculator_manager import MetricCalculatorManager
from metrichunter.config import Settings
from metrichunter.infrastructure.git_provider import GitProvider
from metrichunter.infrastructure.github_client import GitHubGraphQLClient
from metrichunter.infrastructure.json_repository import JsonRepositoryStorage
from metrichunter.infrastructure.path_resolver import PathResolver
from metrichunter.infrastructure.process_runner import AsyncProcessRunner
from metrichunter.infrastructure.sourcemonitor.calculator import SourceMonitorMetricCalculator
from metrichunter.infrastructure.sourcemonitor.job_descriptor import JobDescriptorBuilder


def build_hunter_service(settings: Settings) -> Tuple[HunterService, AsyncProcessRunner]:
    """Create the hunter service and the process runner it drives.

    The runner is returned as well so callers can kill running processes
    on shutdown.
    """
    process_runner = AsyncProcessRunner()
    path_resolver = PathResolver(settings.work_dir)
    job_builder = JobDescriptorBuilder(path_resolver, template_path=settings.sourcemonitor_template)

    calculators = [
        SourceMonitorMetricCalculator(
            process_runner=process_runner,
            path_resolver=path_resolver,
            job_builder=job_builder,
            executable=settings.sourcemonitor_exe
        ),
    ]

    service = HunterService(
        github_client=GitHubGraphQLClient(settings.github_token or ""),
        git_provider=GitProvider(process_runner, path_resolver),
        calculator_manager=MetricCalculatorManager(calculators),
        storage=JsonRepositoryStorage()
    )
    return service, process_runner
