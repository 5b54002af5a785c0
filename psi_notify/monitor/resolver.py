"""
Pressure Source Resolver

Finds the pressure accounting file to read for each resource. The user's
logind slice is preferred so alerts reflect the session's own contention;
the system-global /proc/pressure files are the fallback.

Resolution happens once at startup. A resource with no readable source is
left unmonitored rather than failing the process, which is the normal case
inside containers without a user slice.

SPDX-License-Identifier: BUSL-1.1
"""

import logging
import os
from pathlib import Path

from psi_notify.monitor.models import ResourceKind

logger = logging.getLogger(__name__)

DEFAULT_CGROUP_ROOT = Path("/sys/fs/cgroup")
DEFAULT_PROC_ROOT = Path("/proc")


def user_pressure_path(kind: ResourceKind, uid: int, cgroup_root: Path = DEFAULT_CGROUP_ROOT) -> Path:
    """Pressure file for the user's slice, e.g. user.slice/user-1000.slice/cpu.pressure."""
    return Path(cgroup_root) / "user.slice" / f"user-{uid}.slice" / f"{kind.value}.pressure"


def system_pressure_path(kind: ResourceKind, proc_root: Path = DEFAULT_PROC_ROOT) -> Path:
    """System-global pressure file, e.g. /proc/pressure/cpu."""
    return Path(proc_root) / "pressure" / kind.value


def _is_readable(path: Path) -> bool:
    # EACCES on a parent directory means unreadable, never an error.
    return os.path.isfile(path) and os.access(path, os.R_OK)


def resolve_pressure_file(
    kind: ResourceKind,
    uid: int | None = None,
    cgroup_root: Path = DEFAULT_CGROUP_ROOT,
    proc_root: Path = DEFAULT_PROC_ROOT,
) -> Path | None:
    """
    Resolve the pressure file for a resource.

    Args:
        kind: Resource to resolve
        uid: User id for the cgroup slice (default: the current user)
        cgroup_root: Mount point of the unified cgroup hierarchy
        proc_root: Mount point of procfs

    Returns:
        The first readable candidate, or None if neither is readable
    """
    if uid is None:
        uid = os.getuid()

    candidates = (
        user_pressure_path(kind, uid, cgroup_root),
        system_pressure_path(kind, proc_root),
    )
    for candidate in candidates:
        if _is_readable(candidate):
            logger.debug(f"Using {candidate} for {kind.value} pressure")
            return candidate

    logger.warning(f"No readable pressure source for {kind.value}; not monitoring it")
    return None


def resolve_all(
    uid: int | None = None,
    cgroup_root: Path = DEFAULT_CGROUP_ROOT,
    proc_root: Path = DEFAULT_PROC_ROOT,
) -> dict[ResourceKind, Path | None]:
    """Resolve the pressure file for every resource kind."""
    return {
        kind: resolve_pressure_file(kind, uid=uid, cgroup_root=cgroup_root, proc_root=proc_root)
        for kind in ResourceKind
    }
