"""Local filesystem adapter: sparse allocation and ownership."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from shareseed.core.exceptions import AllocationError


logger = logging.getLogger(__name__)


def split_owner(owner: str) -> tuple[str, str | None]:
    """Split "DOMAIN\\user" or "user:group" into (user, group).

    Example:
        >>> split_owner("CORP\\\\alice")
        ('alice', None)
        >>> split_owner("alice:finance")
        ('alice', 'finance')
    """
    name = owner.rsplit("\\", 1)[-1]
    user, sep, group = name.partition(":")
    return user, (group or None) if sep else None


class LocalFileSystem:
    """FileSystemPort for locally mounted volumes.

    Files are created with O_EXCL so concurrent writers never clobber each
    other, then extended with truncate(), which leaves a hole instead of
    writing zeros on filesystems that support sparse files.

    Attributes:
        apply_ownership: When False, set_owner() only logs. Ownership needs
            privileges and local accounts that tests and dry setups lack.
    """

    def __init__(self, apply_ownership: bool = False) -> None:
        self.apply_ownership = apply_ownership

    def ensure_dir(self, path: Path) -> None:
        """Create path and missing parents; no-op if it already exists."""
        path.mkdir(parents=True, exist_ok=True)

    def allocate_sparse(self, path: Path, nbytes: int, stub: bytes = b"") -> None:
        """Exclusively create a sparse file of nbytes with stub at offset 0.

        The stub is cut short if it is larger than nbytes.

        Raises:
            FileExistsError: If path already exists.
            AllocationError: If the file cannot be written or extended. The
                partial file is removed.
        """
        try:
            f = path.open("xb")
        except FileExistsError:
            raise
        except OSError as e:
            raise AllocationError(
                f"Could not create {path}: {e.strerror or e}", path=path, cause=e
            ) from e

        try:
            with f:
                if stub:
                    f.write(stub[:nbytes])
                f.truncate(nbytes)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise AllocationError(
                f"Could not allocate {nbytes} bytes for {path}: {e.strerror or e}",
                path=path,
                cause=e,
            ) from e

    def set_owner(self, path: Path, owner: str) -> None:
        """chown path to owner ("user", "user:group" or "DOMAIN\\user").

        Raises:
            LookupError: If the user or group does not exist locally.
            OSError: If the caller lacks the privilege to change ownership.
        """
        if not self.apply_ownership or os.name != "posix":
            logger.debug("Owner of %s would be %s", path, owner)
            return
        user, group = split_owner(owner)
        shutil.chown(path, user=user, group=group)

    def allocated_bytes(self, path: Path) -> int:
        """Bytes actually backed by storage, for checking sparseness."""
        st = path.stat()
        blocks = getattr(st, "st_blocks", None)
        if blocks is None:
            return st.st_size
        return blocks * 512
