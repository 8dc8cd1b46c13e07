"""
Build and install the Accumulo native library from the source tarball shipped in lib/.
"""

import logging
import os
import shutil
import tarfile
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from accumulo_util.core.config import InstallPaths
from accumulo_util.core.errors import CommandFailedError, PreconditionError
from accumulo_util.core.settings import (
    NATIVE_LIB_GLOB,
    NATIVE_LIB_NAMES,
    NATIVE_TARBALL_GLOB,
    NATIVE_TMP_PREFIX,
)
from accumulo_util.utils.process import run_command

logger = logging.getLogger(__name__)


@dataclass
class NativeBuildResult:
    """
    Outcome of a native build.

    Attributes:
        target: Directory the library is installed into
        installed: Files copied into target (empty when skipped)
        skipped: True when a library was already present
    """
    target: Path
    installed: List[Path] = field(default_factory=list)
    skipped: bool = False


def existing_native_library(target: Path) -> Optional[Path]:
    """Return the already installed native library in target, if any."""
    for name in NATIVE_LIB_NAMES:
        candidate = target / name
        if candidate.is_file():
            return candidate
    return None


def find_native_tarball(lib_dir: Path) -> Path:
    """
    Locate the single native source tarball in lib_dir.

    Raises:
        PreconditionError: If there is no tarball or more than one
    """
    tarballs = sorted(lib_dir.glob(NATIVE_TARBALL_GLOB))
    if len(tarballs) > 1:
        names = " ".join(str(t) for t in tarballs)
        raise PreconditionError(f"Found multiple native tar.gz files: {names}")
    if not tarballs:
        raise PreconditionError(
            f"Could not find native code artifact: {lib_dir / NATIVE_TARBALL_GLOB}"
        )
    return tarballs[0]


def _unpack(tarball: Path, dest: Path) -> Path:
    """Unpack tarball into dest and return its top-level source directory."""
    try:
        with tarfile.open(tarball, "r:*") as archive:
            archive.extractall(dest, filter="data")
    except (tarfile.TarError, OSError) as e:
        raise PreconditionError(f"Failed to unpack native tarball to {dest}: {e}") from e

    dirs = sorted(p for p in dest.iterdir() if p.is_dir())
    if not dirs:
        raise PreconditionError(f"Native tarball {tarball.name} contains no source directory")
    if len(dirs) > 1:
        logger.warning(f"Native tarball has {len(dirs)} top-level directories, building in {dirs[0].name}")
    return dirs[0]


def build_native(paths: InstallPaths, make_args: Sequence[str] = ()) -> NativeBuildResult:
    """
    Build libaccumulo from lib/accumulo-native-*.tar.gz and install it into lib/native.

    Does nothing if a native library is already installed. The scratch
    directory used for the build is removed whether or not the build
    succeeds.

    Args:
        paths: Installation layout
        make_args: Extra flags handed to the makefile through USERFLAGS

    Returns:
        NativeBuildResult describing what was installed
    """
    target = paths.native
    existing = existing_native_library(target)
    if existing is not None:
        logger.info(f"Native library already exists: {existing}")
        return NativeBuildResult(target=target, skipped=True)

    tarball = find_native_tarball(paths.lib)
    target.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory(prefix=NATIVE_TMP_PREFIX) as tmp:
        source_dir = _unpack(tarball, Path(tmp))
        logger.info(f"Building native library in {source_dir}")

        env = dict(os.environ)
        env["USERFLAGS"] = " ".join(make_args)
        try:
            run_command(["make"], cwd=source_dir, env=env)
        except CommandFailedError as e:
            raise CommandFailedError("Make failed!", command=e.command, returncode=e.returncode) from e

        artifacts = sorted(p for p in source_dir.glob(NATIVE_LIB_GLOB) if p.is_file())
        if not artifacts:
            raise PreconditionError(f"Build produced no {NATIVE_LIB_GLOB} in {source_dir}")

        installed = []
        for artifact in artifacts:
            shutil.copy2(artifact, target / artifact.name)
            installed.append(target / artifact.name)
            logger.debug(f"Installed {artifact.name} into {target}")

    return NativeBuildResult(target=target, installed=installed)
