"""SourceMonitor job descriptor (command file) generation."""
import logging
import os
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional, Union
from metrichunter.domain.models import Repository
from metrichunter.infrastructure.path_resolver import (
    PathResolver,
    REPORTS_DIR,
    REPOSITORIES_DIR,
    SOURCE_MONITOR_DIR
)


logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_PATH = Path(__file__).with_name("template.xml")


@dataclass(frozen=True)
class TemplateReplacements:
    """Placeholder tokens of the SourceMonitor command template.

    project_name names the project and its exported report file,
    project_directory points SourceMonitor at the source tree,
    project_file_directory is where it keeps its .smproj file,
    project_language selects the parser profile and
    reports_path is where the report is exported.
    """
    project_name: str = "{{project_name}}"
    project_directory: str = "{{project_directory}}"
    project_file_directory: str = "{{project_file_directory}}"
    project_language: str = "{{project_language}}"
    reports_path: str = "{{reports_path}}"

    def render(self, template: str, values: Dict[str, str]) -> str:
        """Substitute every token by the value stored under its field name."""
        rendered = template
        for field_name, token in asdict(self).items():
            rendered = rendered.replace(token, values[field_name])
        return rendered


def write_text_atomic(path: Union[str, Path], text: str) -> None:
    """Write text next to the target and move it into place.

    Readers never observe a half written file, even if the process is
    killed mid-write.
    """
    path = Path(path)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


class JobDescriptorBuilder:
    """Renders SourceMonitor command files for repositories."""

    def __init__(
        self,
        path_resolver: PathResolver,
        template_path: Optional[Union[str, Path]] = None,
        replacements: Optional[TemplateReplacements] = None
    ):
        """Initialize job descriptor builder.

        Args:
            path_resolver: Resolver for the language scoped directories
            template_path: Command file template, the bundled one if None
            replacements: Placeholder tokens used by the template
        """
        self._paths = path_resolver
        self._template_path = Path(template_path) if template_path else DEFAULT_TEMPLATE_PATH
        self._replacements = replacements or TemplateReplacements()

    def build_job_descriptor(self, repository: Repository) -> Path:
        """Create the command file for a repository unless it already exists.

        Args:
            repository: Repository to generate the command file for

        Returns:
            Path to the command file
        """
        job_directory = self._paths.build_and_create_path(
            repository.language, SOURCE_MONITOR_DIR, repository.owner
        )
        reports_directory = self._paths.build_and_create_path(
            repository.language, REPORTS_DIR, repository.owner
        )
        project_directory = self._paths.build_path(
            repository.language, REPOSITORIES_DIR, repository.full_name
        )
        descriptor_path = job_directory / f"{repository.name}.xml"

        if descriptor_path.exists():
            logger.info(
                f"SourceMonitor xml file already exists for {repository.full_name}. Skipping..."
            )
            return descriptor_path

        template = self._template_path.read_text(encoding="utf-8")
        content = self._replacements.render(template, {
            "project_name": repository.name,
            "project_directory": str(project_directory.resolve()),
            "project_file_directory": str(job_directory.resolve()),
            "project_language": repository.language,
            "reports_path": str(reports_directory.resolve()),
        })
        write_text_atomic(descriptor_path, content)

        logger.info(f"Created SourceMonitor xml file for {repository.full_name}")
        return descriptor_path
