"""Command execution interface for external CLIs."""
import shutil
import subprocess
from typing import List, Optional

from ..console import log_debug
from ..errors import CommandError

class CommandRunner:
    """Runs kubectl and friends, capturing their output."""

    def __init__(self, debug: bool = False, timeout: Optional[float] = None):
        """Initialize the runner.

        Args:
            debug: If True, print every command before running it.
            timeout: Per-command timeout in seconds.
        """
        self.debug = debug
        self.timeout = timeout

    def available(self, executable: str) -> bool:
        """Check if an executable is on PATH."""
        return shutil.which(executable) is not None

    def run(self, cmd: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a command and capture its output.

        Args:
            cmd: Command and arguments.
            check: If True, raise on a non-zero exit status.

        Returns:
            subprocess.CompletedProcess: The finished process.

        Raises:
            CommandError: If check is set and the command fails.
        """
        log_debug(f"Running command: {' '.join(cmd)}", self.debug)
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        if check and result.returncode != 0:
            raise CommandError(cmd, result.returncode, result.stderr)
        return result

    def succeeds(self, cmd: List[str]) -> bool:
        """Check if a command exits with status zero."""
        return self.run(cmd, check=False).returncode == 0

    def output(self, cmd: List[str]) -> str:
        """Run a command and return its stripped stdout."""
        return self.run(cmd).stdout.strip()

    def spawn(self, cmd: List[str]) -> subprocess.Popen:
        """Start a long-running command in the background."""
        log_debug(f"Starting background command: {' '.join(cmd)}", self.debug)
        return subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
