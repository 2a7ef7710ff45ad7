"""Exit codes for CLI commands.

Every failure surfaced by the install pipeline maps onto one of these codes,
so scripts wrapping ``forgebin`` can tell a typo from a tampered download.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    Values are part of the CLI contract and must stay stable:
    - 0: Success
    - 1: User error (bad reference, unknown version, no asset for platform)
    - 2: Environment error (config unreadable, no API URL for the forge)
    - 3: Integrity error (size or checksum mismatch)
    - 4: Network error (listing or download failed)
    - 5: I/O error (extraction or placement failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    INTEGRITY_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
