"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes and dry-run via wrappers.
"""

from rebaser.core.git.abc import Git, RebaseResult, RebaseStatus, RebaseStep
from rebaser.core.git.dry_run import DryRunGit
from rebaser.core.git.real import RealGit

__all__ = [
    "Git",
    "RebaseResult",
    "RebaseStatus",
    "RebaseStep",
    "RealGit",
    "DryRunGit",
]
