"""
Dump the data Accumulo keeps in ZooKeeper.

The dump itself is done by a Java utility run through bin/accumulo; this
module only locates the launcher and forwards the arguments.
"""

import logging
from typing import Sequence

from accumulo_util.core.config import InstallPaths
from accumulo_util.core.errors import PreconditionError
from accumulo_util.core.settings import DUMP_ZOO_CLASS
from accumulo_util.utils.process import run_command

logger = logging.getLogger(__name__)


def dump_zoo(paths: InstallPaths, args: Sequence[str] = ()) -> int:
    """Run the ZooKeeper dump utility through bin/accumulo and return its exit code."""
    launcher = paths.launcher
    if not launcher.is_file():
        raise PreconditionError(f"Accumulo launcher not found at {launcher}")
    code = run_command([launcher, DUMP_ZOO_CLASS, *args], check=False)
    if code != 0:
        logger.info(f"{DUMP_ZOO_CLASS} exited with {code}")
    return code
