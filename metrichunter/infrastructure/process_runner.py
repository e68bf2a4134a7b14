"""Asyncio based implementation of the process runner port."""
import asyncio
import logging
import os
from typing import List, Optional, Set
from metrichunter.domain.process_interface import (
    IProcessRunner,
    ProcessResult,
    ProcessStartInfo
)


logger = logging.getLogger(__name__)


class AsyncProcessRunner(IProcessRunner):
    """Runs external processes with asyncio subprocesses.

    Keeps track of every process it started so they can all be killed,
    e.g. when the user aborts a long analysis run.
    """

    def __init__(self, default_timeout: Optional[float] = None):
        """Initialize process runner.

        Args:
            default_timeout: Seconds to wait for a process when the start info
                does not specify a timeout, None waits forever
        """
        self._default_timeout = default_timeout
        self._processes: Set[asyncio.subprocess.Process] = set()

    async def run(
        self,
        command: str,
        arguments: List[str],
        working_directory: Optional[str] = None
    ) -> ProcessResult:
        """Run a command and wait for it to finish."""
        return await self.run_process(
            ProcessStartInfo(
                command=command,
                arguments=list(arguments),
                working_directory=working_directory
            )
        )

    async def run_process(self, start_info: ProcessStartInfo) -> ProcessResult:
        """Run a process described by a ProcessStartInfo.

        Stdout and stderr are captured together. A process that outlives its
        timeout is killed and reported with exit code -1.

        Raises:
            OSError: If the executable cannot be started
        """
        env = None
        if start_info.environment is not None:
            env = {**os.environ, **start_info.environment}

        logger.debug(f"Starting process: {start_info.command} {' '.join(start_info.arguments)}")

        try:
            process = await asyncio.create_subprocess_exec(
                start_info.command,
                *start_info.arguments,
                cwd=start_info.working_directory,
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT
            )
        except OSError as e:
            logger.error(f"Could not start {start_info.command}: {e}")
            raise

        self._processes.add(process)
        timeout = start_info.timeout_seconds or self._default_timeout
        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"Process {start_info.command} timed out after {timeout} seconds")
            process.kill()
            await process.wait()
            return ProcessResult(exit_code=-1)
        except asyncio.CancelledError:
            # The caller is gone; the child must not outlive it
            if process.returncode is None:
                logger.warning(f"Killing {start_info.command} (pid {process.pid}) after cancellation")
                process.kill()
                await process.wait()
            raise
        finally:
            self._processes.discard(process)

        output = stdout.decode(errors="replace") if stdout else ""
        logger.debug(f"Process {start_info.command} exited with code {process.returncode}")
        return ProcessResult(exit_code=process.returncode, output=output)

    async def kill_all_processes(self) -> bool:
        """Kill all running processes started by this runner."""
        all_killed = True
        for process in list(self._processes):
            if process.returncode is not None:
                continue
            try:
                process.kill()
                await process.wait()
                logger.info(f"Killed process {process.pid}")
            except ProcessLookupError:
                # Exited between the check and the kill
                pass
            except Exception as e:
                logger.error(f"Error killing process {process.pid}: {e}")
                all_killed = False
        return all_killed
