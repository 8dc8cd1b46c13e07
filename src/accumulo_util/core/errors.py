"""
Exception hierarchy for accumulo-util.

Every failure the commands know how to describe is raised as a UtilError
subclass. The CLI turns these into a printed message and a process exit
code; anything else propagates with its traceback.
"""

from typing import List, Optional


class UtilError(Exception):
    """Base error carrying the process exit code to use."""

    exit_code = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(UtilError):
    """Raised when a setting or a property needed by a command is missing or invalid."""
    pass


class PreconditionError(UtilError):
    """Raised when a required file or external tool is not where it should be."""
    pass


class CommandFailedError(UtilError):
    """Raised when an external program exits with a non-zero status."""

    def __init__(self, message: str, command: List[str], returncode: int):
        super().__init__(message)
        self.command = command
        self.returncode = returncode


class AbortedError(UtilError):
    """Raised when the user declines an interactive prompt."""
    pass
