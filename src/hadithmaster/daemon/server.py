"""Background process that keeps the daily schedule filled in.

Usage:
    hadithmaster daemon start   # Fork into the background
    hadithmaster daemon stop    # SIGTERM, then SIGKILL after a grace period
    hadithmaster daemon status  # Read the pid file
"""

import asyncio
import logging
import os
import signal
import sys
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from ..config import Settings, settings
from ..utils.logging import setup_logging
from .scheduler import DailyScheduler

logger = logging.getLogger(__name__)

STOP_TIMEOUT = 10.0


class DaemonStatus(Enum):
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class DaemonInfo:
    """Snapshot of the daemon as seen from its pid file."""

    status: DaemonStatus
    pid: int | None
    started_at: datetime | None
    jobs_registered: int
    log_file: Path

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "pid": self.pid,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "jobs_registered": self.jobs_registered,
            "log_file": str(self.log_file),
        }


class PidFile:
    """Pid of the running daemon; its mtime is the start time."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> int | None:
        """Pid in the file, None if missing or garbled."""
        try:
            return int(self.path.read_text().strip())
        except (OSError, ValueError):
            return None

    def write(self) -> None:
        self.path.write_text(str(os.getpid()))
        logger.info(f"PID file written: {self.path}")

    def remove(self) -> None:
        self.path.unlink(missing_ok=True)

    def started_at(self) -> datetime | None:
        try:
            return datetime.fromtimestamp(self.path.stat().st_mtime)
        except OSError:
            return None


def is_process_running(pid: int) -> bool:
    """Check for a live process with signal 0."""
    try:
        os.kill(pid, 0)
    except OSError:
        return False
    return True


class DaemonServer:
    """Runs DailyScheduler until SIGTERM or SIGINT."""

    def __init__(
        self, cfg: Settings | None = None, scheduler: DailyScheduler | None = None
    ) -> None:
        self.cfg = cfg or settings
        self.data_dir = self.cfg.data_dir
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.pid_file = PidFile(self.data_dir / "daemon.pid")
        self.log_file = self.cfg.log_path or self.data_dir / "daemon.log"
        self.scheduler = scheduler or DailyScheduler(cfg=self.cfg)
        self._shutdown = asyncio.Event()

    def _live_pid(self) -> int | None:
        """Pid of a running daemon. A stale pid file is removed."""
        pid = self.pid_file.read()
        if pid is None:
            return None
        if not is_process_running(pid):
            logger.info(f"Removing stale PID file for {pid}")
            self.pid_file.remove()
            return None
        return pid

    def get_status(self) -> DaemonInfo:
        pid = self._live_pid()
        running = pid is not None
        return DaemonInfo(
            status=DaemonStatus.RUNNING if running else DaemonStatus.STOPPED,
            pid=pid,
            started_at=self.pid_file.started_at() if running else None,
            jobs_registered=len(self.scheduler.get_job_info()) if running else 0,
            log_file=self.log_file,
        )

    async def start(self, foreground: bool = False) -> None:
        """Run the scheduler until a shutdown signal arrives.

        Args:
            foreground: Stay attached to the terminal instead of forking
        """
        existing = self._live_pid()
        if existing is not None:
            logger.error(f"Daemon already running with PID {existing}")
            return

        if not foreground:
            self._daemonize()

        setup_logging(
            self.cfg.log_level,
            self.log_file,
            console_level="INFO" if foreground else None,
        )
        logger.info("Hadith Master daemon starting...")
        self.pid_file.write()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._shutdown.set)

        try:
            await self.scheduler.start()
            await self._shutdown.wait()
            logger.info("Received shutdown signal")
        except Exception as e:
            logger.exception(f"Daemon error: {e}")
        finally:
            await self.scheduler.stop()
            self.pid_file.remove()
            logger.info("Daemon stopped")

    def _daemonize(self) -> None:
        """Detach with the Unix double fork; stdout and stderr go to the log file."""
        for attempt in (1, 2):
            try:
                if os.fork() > 0:
                    sys.exit(0)
            except OSError as e:
                logger.error(f"Fork #{attempt} failed: {e}")
                sys.exit(1)
            if attempt == 1:
                os.chdir("/")
                os.setsid()
                os.umask(0o022)

        sys.stdout.flush()
        sys.stderr.flush()
        with open(os.devnull) as devnull:
            os.dup2(devnull.fileno(), sys.stdin.fileno())
        log_fd = os.open(str(self.log_file), os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o644)
        os.dup2(log_fd, sys.stdout.fileno())
        os.dup2(log_fd, sys.stderr.fileno())

    def stop(self, timeout: float = STOP_TIMEOUT) -> bool:
        """Signal a running daemon and wait for it to exit.

        Returns:
            True if a daemon was running and is now gone
        """
        pid = self._live_pid()
        if pid is None:
            logger.info("Daemon is not running")
            return False

        logger.info(f"Stopping daemon (PID {pid})...")
        try:
            os.kill(pid, signal.SIGTERM)
            deadline = time.monotonic() + timeout
            while time.monotonic() < deadline:
                if not is_process_running(pid):
                    return True
                time.sleep(0.25)

            logger.warning(f"Daemon ignored SIGTERM for {timeout:.0f}s, sending SIGKILL")
            os.kill(pid, signal.SIGKILL)
        except OSError as e:
            logger.error(f"Failed to stop daemon: {e}")
            return False
        self.pid_file.remove()
        return True


def run_daemon(foreground: bool = False) -> None:
    asyncio.run(DaemonServer().start(foreground=foreground))


def stop_daemon() -> bool:
    return DaemonServer().stop()


def get_daemon_status() -> DaemonInfo:
    return DaemonServer().get_status()
