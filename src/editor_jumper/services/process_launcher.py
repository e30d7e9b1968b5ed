"""Runs launch plans as external processes.

Single-step launches are fire-and-forget: the IDE is started detached from
this process, the caller gets control back, and a monitor task watches it
for an early failure, reported through ``on_failure``. Multi-step plans
(Xcode) run each short-lived step to completion and sequence the file-open
step behind a readiness heuristic.
"""

import asyncio
import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass
from enum import Enum
from typing import IO, Awaitable, Callable, List, Optional, Set, Tuple, Union

import psutil

from ..models.config import JumperSettings
from ..models.launch import Invocation, LaunchPlan, LaunchReport
from .error_handler import JumperError, ProcessSpawnError

logger = logging.getLogger(__name__)

# Only the end of a failing launcher's stderr is reported
STDERR_TAIL_BYTES = 4096


class XcodeLaunchState(str, Enum):
    """States of a sequenced (two-step) launch."""
    IDLE = "idle"
    LAUNCHING = "launching"
    WAITING_FOR_READY = "waiting_for_ready"
    OPENING_FILE = "opening_file"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PollOnce:
    """Check the process table once; wait ``grace_period`` only if the app was not running.

    This is a heuristic, not a readiness handshake: a slow machine can still
    lose the race.
    """
    grace_period: float = 3.0

    def delay_for(self, already_running: bool) -> float:
        return 0.0 if already_running else self.grace_period


@dataclass(frozen=True)
class FixedDelay:
    """Always wait ``delay`` seconds before the dependent step."""
    delay: float

    def delay_for(self, already_running: bool) -> float:
        return self.delay


ReadinessStrategy = Union[PollOnce, FixedDelay]


def readiness_from_settings(settings: JumperSettings) -> ReadinessStrategy:
    if settings.readiness == "fixed_delay":
        return FixedDelay(settings.xcode_grace_period)
    return PollOnce(settings.xcode_grace_period)


def is_application_running(app_name: str) -> bool:
    """True if a process named ``app_name`` (case-insensitive) is running."""
    wanted = app_name.lower()
    for proc in psutil.process_iter(["name"]):
        try:
            name = proc.info.get("name") or ""
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        if name.lower() == wanted:
            return True
    return False


# (ide_id, invocation, error text)
FailureCallback = Callable[[str, Invocation, str], None]



class ProcessLauncher:
    """Spawns invocations as external processes.

    Detached launches write stderr to an unlinked temporary file rather than
    a pipe, so the IDE neither blocks nor dies of SIGPIPE once this process
    stops reading, and its output never accumulates in memory. The monitor
    only watches for ``monitor_window`` seconds; an IDE still running by then
    counts as launched.
    """

    def __init__(
        self,
        readiness: Optional[ReadinessStrategy] = None,
        running_check: Callable[[str], bool] = is_application_running,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_failure: Optional[FailureCallback] = None,
        monitor_window: float = 30.0,
        poll_interval: float = 0.25,
    ):
        self.readiness = readiness or PollOnce()
        self.running_check = running_check
        self._sleep = sleep
        self.on_failure = on_failure
        self.monitor_window = monitor_window
        self.poll_interval = poll_interval
        self._monitors: Set[asyncio.Task] = set()

    @staticmethod
    def _session_kwargs() -> dict:
        if os.name != "nt":
            # Detach so the IDE outlives this process
            return {"start_new_session": True}
        return {}

    async def spawn(self, invocation: Invocation) -> asyncio.subprocess.Process:
        """Start a short-lived step; OS errors become :class:`ProcessSpawnError`."""
        logger.info(f"Running: {invocation.display()}")
        streams = dict(
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
            **self._session_kwargs()
        )
        try:
            if invocation.shell_command is not None:
                return await asyncio.create_subprocess_shell(invocation.shell_command, **streams)
            return await asyncio.create_subprocess_exec(*invocation.argv, **streams)
        except OSError as e:
            raise ProcessSpawnError(str(e), {"argv": list(invocation.argv)}) from e

    def start_detached(self, invocation: Invocation) -> Tuple[subprocess.Popen, IO[bytes]]:
        """Start a long-lived IDE process; returns it with its stderr log file.

        Not an asyncio subprocess: its transport kills the child when it is
        closed or collected.
        """
        logger.info(f"Launching: {invocation.display()}")
        stderr_log = tempfile.TemporaryFile()
        try:
            if invocation.shell_command is not None:
                args, shell = invocation.shell_command, True
            else:
                args, shell = list(invocation.argv), False
            proc = subprocess.Popen(
                args,
                shell=shell,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=stderr_log,
                **self._session_kwargs()
            )
        except OSError as e:
            stderr_log.close()
            raise ProcessSpawnError(str(e), {"argv": list(invocation.argv)}) from e
        return proc, stderr_log

    @staticmethod
    def _exit_message(returncode: int, stderr: Optional[bytes]) -> str:
        text = (stderr or b"").decode(errors="replace").strip()
        return text or f"Process exited with code {returncode}"

    @staticmethod
    def _read_tail(stderr_log: IO[bytes]) -> bytes:
        stderr_log.seek(0, os.SEEK_END)
        size = stderr_log.tell()
        stderr_log.seek(max(0, size - STDERR_TAIL_BYTES))
        return stderr_log.read()

    async def run_to_completion(self, invocation: Invocation) -> int:
        """Spawn ``invocation`` and wait for it; a non-zero exit raises."""
        proc = await self.spawn(invocation)
        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise ProcessSpawnError(
                self._exit_message(proc.returncode, stderr),
                {"argv": list(invocation.argv), "returncode": proc.returncode},
            )
        return proc.pid

    async def _monitor(self, ide_id: str, invocation: Invocation, proc, stderr_log: IO[bytes]) -> None:
        try:
            waited = 0.0
            while proc.poll() is None:
                if waited >= self.monitor_window:
                    logger.debug(f"{invocation.program} (pid={proc.pid}) still running, no longer monitored")
                    return
                await asyncio.sleep(self.poll_interval)
                waited += self.poll_interval

            if proc.returncode == 0:
                logger.debug(f"{invocation.program} (pid={proc.pid}) exited cleanly")
                return
            message = self._exit_message(proc.returncode, self._read_tail(stderr_log))
            logger.warning(f"{invocation.display()} exited with {proc.returncode}: {message}")
            if self.on_failure:
                self.on_failure(ide_id, invocation, message)
        finally:
            stderr_log.close()

    def _watch(self, ide_id: str, invocation: Invocation, proc, stderr_log: IO[bytes]) -> None:
        task = asyncio.create_task(self._monitor(ide_id, invocation, proc, stderr_log), name=f"monitor_{proc.pid}")
        self._monitors.add(task)
        task.add_done_callback(self._monitors.discard)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for outstanding exit monitors (shutdown and tests)."""
        if self._monitors:
            await asyncio.wait(set(self._monitors), timeout=timeout)

    async def launch(self, plan: LaunchPlan, readiness: Optional[ReadinessStrategy] = None) -> LaunchReport:
        """Execute ``plan``. Raises :class:`JumperError` subclasses on failure.

        ``readiness`` overrides the launcher default for this plan only.
        """
        if any(step.requires_readiness for step in plan.steps):
            return await self._launch_sequenced(plan, readiness or self.readiness)

        report = LaunchReport(states=[XcodeLaunchState.IDLE.value, XcodeLaunchState.LAUNCHING.value])
        for step in plan.steps:
            proc, stderr_log = self.start_detached(step.invocation)
            report.pids.append(proc.pid)
            self._watch(plan.ide_id, step.invocation, proc, stderr_log)
        report.states.append(XcodeLaunchState.DONE.value)
        return report

    async def _launch_sequenced(self, plan: LaunchPlan, readiness: ReadinessStrategy) -> LaunchReport:
        report = LaunchReport()
        states: List[str] = report.states

        def transition(state: XcodeLaunchState) -> None:
            logger.debug(f"{plan.ide_id} launch: {states[-1] if states else '-'} -> {state.value}")
            states.append(state.value)

        transition(XcodeLaunchState.IDLE)
        # Check before launching: once the first step returns the process exists
        # but may not accept commands yet. The process table walk runs off the loop.
        already_running = bool(plan.app_process_name) and await asyncio.to_thread(
            self.running_check, plan.app_process_name
        )
        logger.debug(f"{plan.app_process_name} already running: {already_running}")

        try:
            for step in plan.steps:
                if step.requires_readiness:
                    delay = readiness.delay_for(already_running)
                    report.readiness_delay = delay
                    if delay > 0:
                        transition(XcodeLaunchState.WAITING_FOR_READY)
                        await self._sleep(delay)
                    transition(XcodeLaunchState.OPENING_FILE)
                else:
                    transition(XcodeLaunchState.LAUNCHING)
                report.pids.append(await self.run_to_completion(step.invocation))
        except JumperError:
            transition(XcodeLaunchState.FAILED)
            raise

        transition(XcodeLaunchState.DONE)
        return report
