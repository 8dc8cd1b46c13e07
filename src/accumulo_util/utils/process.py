"""
Helpers for locating and running the external programs the commands drive.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from accumulo_util.core.errors import CommandFailedError, PreconditionError

logger = logging.getLogger(__name__)


def find_executable(name: str, home: Optional[Union[str, Path]] = None) -> Optional[str]:
    """
    Find an executable, preferring ``<home>/bin/<name>`` over PATH.

    Args:
        name: Program name, e.g. "hadoop"
        home: Tool home directory (HADOOP_HOME, JAVA_HOME, ...), if set

    Returns:
        Path to the executable, or None if it cannot be found
    """
    if home:
        candidate = Path(home) / "bin" / name
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate)
    return shutil.which(name)


def run_command(
    cmd: Sequence[Union[str, Path]],
    *,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Dict[str, str]] = None,
    stdin_text: Optional[str] = None,
    quiet: bool = False,
    check: bool = True,
) -> int:
    """
    Run an external program to completion.

    Args:
        cmd: Program and arguments
        cwd: Working directory for the child
        env: Full environment for the child (inherits ours when None)
        stdin_text: Text to feed on stdin; stdin is inherited when None
        quiet: Discard the child's stdout (stderr is kept)
        check: Raise CommandFailedError on a non-zero exit

    Returns:
        The child's exit code

    Raises:
        PreconditionError: If the program does not exist
        CommandFailedError: If check is set and the program fails
    """
    args: List[str] = [str(part) for part in cmd]
    logger.debug(f"Running: {' '.join(args)}" + (f" (in {cwd})" if cwd else ""))

    try:
        result = subprocess.run(
            args,
            cwd=str(cwd) if cwd else None,
            env=env,
            input=stdin_text,
            text=True,
            stdout=subprocess.DEVNULL if quiet else None,
        )
    except FileNotFoundError as e:
        raise PreconditionError(f"Command not found: {args[0]}") from e

    if result.returncode != 0:
        logger.debug(f"{args[0]} exited with {result.returncode}")
        if check:
            raise CommandFailedError(
                f"Command failed with exit code {result.returncode}: {' '.join(args)}",
                command=args,
                returncode=result.returncode,
            )
    return result.returncode
