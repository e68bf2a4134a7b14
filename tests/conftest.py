"""Shared fixtures for the metric hunter tests."""
from typing import List, Optional
import pytest
from metrichunter.domain.models import Repository
from metrichunter.domain.process_interface import (
    IProcessRunner,
    ProcessResult,
    ProcessStartInfo
)
from metrichunter.infrastructure.path_resolver import PathResolver


REPORT_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<sourcemonitor_metrics>
  <project version="3.5">
    <project_name>{name}</project_name>
    <metric_names name_count="{count}">
{names}
    </metric_names>
    <checkpoints checkpoint_count="1">
      <checkpoint checkpoint_name="Baseline">
        <metrics metric_count="{count}">
{values}
        </metrics>
      </checkpoint>
    </checkpoints>
  </project>
</sourcemonitor_metrics>
"""


def make_report(name: str, names: List[str], values: List[str]) -> str:
    """Render a SourceMonitor summary export."""
    name_lines = "\n".join(
        f'      <metric_name id="M{i}">{metric}</metric_name>' for i, metric in enumerate(names)
    )
    value_lines = "\n".join(
        f'          <metric id="M{i}">{value}</metric>' for i, value in enumerate(values)
    )
    return REPORT_TEMPLATE.format(name=name, count=len(names), names=name_lines, values=value_lines)


class FakeSourceMonitor(IProcessRunner):
    """Process runner that plays SourceMonitor by writing a report file."""

    def __init__(self, report: Optional[str] = None, exit_code: int = 0):
        self.report = report
        self.exit_code = exit_code
        self.calls: List[ProcessStartInfo] = []
        self.report_targets: List[str] = []

    async def run(self, command, arguments, working_directory=None) -> ProcessResult:
        return await self.run_process(
            ProcessStartInfo(command=command, arguments=list(arguments), working_directory=working_directory)
        )

    async def run_process(self, start_info: ProcessStartInfo) -> ProcessResult:
        self.calls.append(start_info)
        if self.report is not None and self.exit_code == 0:
            # The command file names the export target
            with open(start_info.arguments[-1], encoding="utf-8") as f:
                descriptor = f.read()
            target = descriptor.split("<export_file>")[1].split("</export_file>")[0]
            with open(target, "w", encoding="utf-8") as f:
                f.write(self.report)
            self.report_targets.append(target)
        return ProcessResult(exit_code=self.exit_code, output="")

    async def kill_all_processes(self) -> bool:
        return True


@pytest.fixture
def path_resolver(tmp_path) -> PathResolver:
    return PathResolver(tmp_path)


@pytest.fixture
def repository() -> Repository:
    return Repository(
        repo_id=1,
        owner="owner1",
        name="foo",
        language="C#",
        size=100,
        star_count=10,
        url="https://github.com/owner1/foo"
    )
