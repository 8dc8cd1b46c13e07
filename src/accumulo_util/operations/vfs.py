"""
Load the jars in lib/ into HDFS so tablet servers can use the VFS classloader.

The jars are moved (not copied) into the directory named by
general.vfs.classpaths and replicated widely to avoid hot datanodes at
cluster start. The few jars the local classloader needs to boot are then
copied back out and removed from HDFS.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from accumulo_util.core.config import InstallPaths
from accumulo_util.core.errors import CommandFailedError, ConfigurationError, PreconditionError
from accumulo_util.core.properties import count_entries, get_property
from accumulo_util.core.settings import (
    BOOT_JARS,
    CLIENTS_PER_DATANODE,
    MIN_REPLICATION,
    VFS_CLASSPATHS_PROPERTY,
)
from accumulo_util.utils.process import find_executable, run_command

logger = logging.getLogger(__name__)


class HadoopFs:
    """Thin wrapper around ``hadoop fs`` subcommands. Child stdout is discarded."""

    def __init__(self, hadoop: str):
        self.hadoop = hadoop

    @classmethod
    def locate(cls, hadoop_home: Optional[str]) -> "HadoopFs":
        hadoop = find_executable("hadoop", hadoop_home)
        if not hadoop:
            raise PreconditionError(
                "Could not find 'hadoop' command. Please set hadoop on your PATH or set HADOOP_HOME"
            )
        logger.debug(f"Using hadoop at {hadoop}")
        return cls(hadoop)

    def _fs(self, *args: Union[str, Path], check: bool = True) -> int:
        return run_command([self.hadoop, "fs", *args], quiet=True, check=check)

    def exists(self, path: str) -> bool:
        return self._fs("-ls", path, check=False) == 0

    def mkdir(self, path: str) -> bool:
        return self._fs("-mkdir", path, check=False) == 0

    def move_from_local(self, sources: Sequence[Path], dest: str) -> None:
        self._fs("-moveFromLocal", *sources, dest)

    def set_replication(self, path: str, replication: int) -> None:
        self._fs("-setrep", "-R", str(replication), path)

    def copy_to_local(self, source: str, dest: Path) -> None:
        self._fs("-copyToLocal", source, dest)

    def rm(self, path: str) -> None:
        self._fs("-rm", path)


@dataclass
class VfsLoadResult:
    classpath_dir: str
    replication: int
    uploaded: List[Path] = field(default_factory=list)
    restored: List[str] = field(default_factory=list)


def replication_factor(num_servers: int) -> int:
    """One replica per CLIENTS_PER_DATANODE servers, never below MIN_REPLICATION."""
    return max(MIN_REPLICATION, num_servers // CLIENTS_PER_DATANODE)


def vfs_classpath_dir(paths: InstallPaths) -> str:
    """
    Read the HDFS system context directory from accumulo.properties.

    Raises:
        ConfigurationError: If the property is missing
    """
    value = get_property(paths.properties, VFS_CLASSPATHS_PROPERTY)
    if not value:
        raise ConfigurationError(
            f"Your accumulo.properties file is not set up for the HDFS Classloader. "
            f"Please add the following to your accumulo.properties file where "
            f"{{MY_HDFS_PATH}} is the root path for your system context:\n\n"
            f"{VFS_CLASSPATHS_PROPERTY}=hdfs://{{MY_HDFS_PATH}}"
        )
    return value


def ensure_directory(fs: HadoopFs, path: str) -> None:
    if fs.exists(path):
        return
    if not fs.mkdir(path):
        raise CommandFailedError(
            f"Unable to create classpath directory at {path}",
            command=[fs.hadoop, "fs", "-mkdir", path],
            returncode=1,
        )
    logger.info(f"Created classpath directory {path}")


def load_jars_hdfs(paths: InstallPaths, hadoop_home: Optional[str]) -> VfsLoadResult:
    """
    Move lib/*.jar into the VFS classpath directory in HDFS.

    Args:
        paths: Installation layout
        hadoop_home: HADOOP_HOME, searched before PATH for the hadoop client

    Returns:
        VfsLoadResult describing what was uploaded and restored

    Raises:
        PreconditionError: If hadoop or the local jars cannot be found
        ConfigurationError: If general.vfs.classpaths is not set
        CommandFailedError: If a hadoop fs command fails
    """
    fs = HadoopFs.locate(hadoop_home)
    target = vfs_classpath_dir(paths)
    ensure_directory(fs, target)

    # Replicate to all tservers to avoid network contention on startup
    replication = replication_factor(count_entries(paths.servers))

    jars = sorted(paths.lib.glob("*.jar"))
    if not jars:
        raise PreconditionError(f"No jars found in {paths.lib}")

    logger.info(f"Moving {len(jars)} jars to {target} with replication {replication}")
    fs.move_from_local(jars, target)
    fs.set_replication(target, replication)

    base = target.rstrip("/")
    for jar in BOOT_JARS:
        remote = f"{base}/{jar}"
        fs.copy_to_local(remote, paths.lib)
        fs.rm(remote)
        logger.debug(f"Restored {jar} to {paths.lib}")

    return VfsLoadResult(
        classpath_dir=target,
        replication=replication,
        uploaded=jars,
        restored=list(BOOT_JARS),
    )
