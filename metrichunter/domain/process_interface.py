"""Process execution interface (port) for running external tools."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ProcessStartInfo:
    """Fully specified description of a process to start."""
    command: str
    arguments: List[str] = field(default_factory=list)
    working_directory: Optional[str] = None
    environment: Optional[Dict[str, str]] = None
    timeout_seconds: Optional[float] = None


@dataclass(frozen=True)
class ProcessResult:
    """Exit code and captured output of a finished process."""
    exit_code: int
    output: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class IProcessRunner(ABC):
    """Abstract interface for running external processes."""

    @abstractmethod
    async def run(
        self,
        command: str,
        arguments: List[str],
        working_directory: Optional[str] = None
    ) -> ProcessResult:
        """Run a command and wait for it to finish.

        Args:
            command: Executable to start
            arguments: Arguments passed to the executable
            working_directory: Directory to run in, current directory if None

        Returns:
            ProcessResult with exit code and combined output
        """
        pass

    @abstractmethod
    async def run_process(self, start_info: ProcessStartInfo) -> ProcessResult:
        """Run a process described by a ProcessStartInfo."""
        pass

    @abstractmethod
    async def kill_all_processes(self) -> bool:
        """Kill every process started by this runner that is still alive.

        Returns:
            True if all processes are gone afterwards
        """
        pass
