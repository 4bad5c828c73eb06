"""Shell command actions for tasks declared in job files."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShellAction:
    """Run a command; a string goes through the shell, a list is argv.
    Non-zero exit raises subprocess.CalledProcessError."""

    command: str | list[str]
    cwd: str | None = None

    def __call__(self) -> None:
        shell = isinstance(self.command, str)
        logger.debug("exec %s", self.command)
        proc = subprocess.run(
            self.command,
            shell=shell,
            cwd=self.cwd,
            capture_output=True,
            text=True,
        )
        for line in proc.stdout.splitlines():
            logger.debug("  | %s", line)
        if proc.returncode != 0:
            for line in proc.stderr.splitlines():
                logger.warning("  ! %s", line)
            raise subprocess.CalledProcessError(
                proc.returncode, self.command, output=proc.stdout, stderr=proc.stderr
            )
