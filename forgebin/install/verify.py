"""Integrity checks for downloaded asset content.

Both checks are opt-in. When configured, a failure is final for the install
attempt: there is no warning mode and no partial acceptance.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import TYPE_CHECKING

from forgebin.core.result import Err, Ok, Result
from forgebin.install.errors import ChecksumMismatch, IntegrityError, SizeMismatch

if TYPE_CHECKING:
    from forgebin.install.options import Checksum

__all__ = ["VerifiedArtifact", "digest", "verify"]


@dataclass(frozen=True, slots=True)
class VerifiedArtifact:
    """Content that passed ``verify``.

    Attributes:
        data: The downloaded bytes
        sha256: Hex sha256 of ``data``, recorded in the lock file
    """

    data: bytes
    sha256: str

    @property
    def size(self) -> int:
        return len(self.data)


def digest(data: bytes, algorithm: str) -> str:
    """Lowercase hex digest of ``data``."""
    return hashlib.new(algorithm, data).hexdigest()


def verify(
    data: bytes,
    checksum: Checksum | None = None,
    size: int | None = None,
) -> Result[VerifiedArtifact, IntegrityError]:
    """Check ``data`` against the expected size and checksum.

    Size is checked first; a size mismatch is reported even if the checksum
    would also fail.
    """
    if size is not None and len(data) != size:
        return Err(SizeMismatch(expected=size, actual=len(data)))

    if checksum is not None:
        actual = digest(data, checksum.algorithm)
        if actual.lower() != checksum.digest.lower():
            return Err(
                ChecksumMismatch(
                    algorithm=checksum.algorithm,
                    expected=checksum.digest,
                    actual=actual,
                )
            )

    return Ok(VerifiedArtifact(data=data, sha256=digest(data, "sha256")))
