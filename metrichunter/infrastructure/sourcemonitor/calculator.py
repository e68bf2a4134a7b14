"""SourceMonitor based metric calculator.

Drives the SourceMonitor executable through a generated command file and
turns the exported XML summary into Metric entities.
"""
import asyncio
import logging
import os
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import FrozenSet, List, Optional
from metrichunter.domain.exceptions import ReportLoadError
from metrichunter.domain.metric_interface import IMetricCalculator
from metrichunter.domain.models import Metric, Repository
from metrichunter.domain.process_interface import IProcessRunner
from metrichunter.infrastructure.path_resolver import PathResolver, REPORTS_DIR
from metrichunter.infrastructure.sourcemonitor.job_descriptor import JobDescriptorBuilder


logger = logging.getLogger(__name__)


class SourceMonitorMetricCalculator(IMetricCalculator):
    """Metric calculator backed by the SourceMonitor command line mode.

    Reports are cached on disk: a repository whose tagged report already
    exists is never analyzed again.
    """

    languages: FrozenSet[str] = frozenset({"C#", "C++", "Java"})

    def __init__(
        self,
        process_runner: IProcessRunner,
        path_resolver: PathResolver,
        job_builder: JobDescriptorBuilder,
        executable: str
    ):
        """Initialize SourceMonitor calculator.

        Args:
            process_runner: Runner used to start SourceMonitor
            path_resolver: Resolver for the language scoped directories
            job_builder: Builder for the SourceMonitor command files
            executable: Path to the SourceMonitor executable
        """
        self._process_runner = process_runner
        self._paths = path_resolver
        self._job_builder = job_builder
        self._executable = executable

    def report_path(self, repository: Repository) -> Path:
        """Path of the report as exported by SourceMonitor."""
        return self._paths.build_path(
            repository.language, REPORTS_DIR, f"{repository.full_name}.xml"
        )

    def tagged_report_path(self, repository: Repository) -> Path:
        """Path of the report after it was tagged and renamed."""
        report_path = self.report_path(repository)
        return report_path.with_name(f"id_{repository.repo_id}_{report_path.name}")

    async def calculate_metrics(
        self,
        repository: Repository,
        cancel_event: Optional[asyncio.Event] = None
    ) -> List[Metric]:
        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Calculation cancelled before {repository.full_name}")
            return []

        tagged_path = self.tagged_report_path(repository)
        if tagged_path.exists():
            logger.info(f"Reports already exist for {repository.full_name}. Skipping...")
            return self._get_metrics(self._load_report(tagged_path))

        report_path = self.report_path(repository)
        if report_path.exists():
            logger.info(f"Reports already exist for {repository.full_name}. Skipping...")
        else:
            await self._run_source_monitor(repository)

        tree = self._load_report(report_path)
        self._add_id(repository, tree, report_path)
        renamed_path = self._rename_report(repository, report_path)
        logger.info(f"Tagged report for {repository.full_name} saved as {renamed_path.name}")

        return self._get_metrics(tree)

    async def _run_source_monitor(self, repository: Repository) -> None:
        logger.info(f"Calculating statistics for {repository.full_name}")
        descriptor_path = self._job_builder.build_job_descriptor(repository)

        result = await self._process_runner.run(self._executable, ["/C", str(descriptor_path)])
        if result.exit_code == 0:
            logger.info(f"Statistics for {repository.full_name} calculated successfully")
        else:
            # No report will exist; loading it raises the real error
            logger.error(
                f"Error while calculating statistics for {repository.full_name} "
                f"(exit code {result.exit_code})"
            )

    @staticmethod
    def _load_report(report_path: Path) -> ET.ElementTree:
        """Parse a report file, keeping comments and processing instructions.

        Raises:
            ReportLoadError: If the file is missing or malformed
        """
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
        try:
            return ET.parse(str(report_path), parser=parser)
        except FileNotFoundError as e:
            raise ReportLoadError(f"Report not found: {report_path}", str(report_path)) from e
        except ET.ParseError as e:
            raise ReportLoadError(f"Malformed report {report_path}: {e}", str(report_path)) from e

    @staticmethod
    def _add_id(repository: Repository, tree: ET.ElementTree, report_path: Path) -> None:
        tree.getroot().set("id", str(repository.repo_id))
        fd, tmp_path = tempfile.mkstemp(
            dir=str(report_path.parent), prefix=f".{report_path.name}.", suffix=".tmp"
        )
        os.close(fd)
        try:
            tree.write(tmp_path, encoding="UTF-8", xml_declaration=True)
            os.replace(tmp_path, report_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _rename_report(self, repository: Repository, report_path: Path) -> Path:
        new_path = self.tagged_report_path(repository)
        if new_path.exists():
            os.remove(new_path)
        os.replace(report_path, new_path)
        return new_path

    @staticmethod
    def _get_metrics(tree: ET.ElementTree) -> List[Metric]:
        root = tree.getroot()
        names = root.iter("metric_name")
        values = root.iter("metric")
        # zip stops at the shorter sequence
        return [
            Metric(name=(name.text or "").strip(), value=(value.text or "").strip())
            for name, value in zip(names, values)
        ]
