"""Tests for forgebin.install.verify."""

import hashlib

from forgebin.core.result import Err, Ok
from forgebin.install.errors import ChecksumMismatch, SizeMismatch
from forgebin.install.options import Checksum
from forgebin.install.verify import VerifiedArtifact, digest, verify

DATA = b"0123456789"
SHA256 = hashlib.sha256(DATA).hexdigest()


class TestVerify:
    def test_no_expectations(self) -> None:
        result = verify(DATA)
        assert isinstance(result, Ok)
        assert result.value == VerifiedArtifact(data=DATA, sha256=SHA256)
        assert result.value.size == 10

    def test_size_match(self) -> None:
        assert isinstance(verify(DATA, size=10), Ok)

    def test_size_mismatch(self) -> None:
        result = verify(DATA, size=11)
        assert isinstance(result, Err)
        assert result.error == SizeMismatch(expected=11, actual=10)

    def test_size_checked_before_checksum(self) -> None:
        wrong = Checksum("sha256", "0" * 64)
        result = verify(DATA, wrong, size=11)
        assert isinstance(result, Err)
        assert isinstance(result.error, SizeMismatch)

    def test_checksum_match(self) -> None:
        assert isinstance(verify(DATA, Checksum("sha256", SHA256)), Ok)

    def test_checksum_is_case_insensitive(self) -> None:
        checksum = Checksum.parse(f"SHA256:{SHA256.upper()}")
        assert isinstance(verify(DATA, checksum), Ok)

    def test_checksum_mismatch(self) -> None:
        result = verify(DATA, Checksum("sha256", "0" * 64))
        assert isinstance(result, Err)
        assert result.error == ChecksumMismatch(
            algorithm="sha256", expected="0" * 64, actual=SHA256
        )

    def test_other_algorithm_still_records_sha256(self) -> None:
        checksum = Checksum("sha512", hashlib.sha512(DATA).hexdigest())
        result = verify(DATA, checksum)
        assert isinstance(result, Ok)
        assert result.value.sha256 == SHA256

    def test_empty_content(self) -> None:
        result = verify(b"", size=0)
        assert isinstance(result, Ok)
        assert result.value.sha256 == hashlib.sha256(b"").hexdigest()


class TestDigest:
    def test_lowercase_hex(self) -> None:
        assert digest(DATA, "md5") == hashlib.md5(DATA).hexdigest()
        assert digest(DATA, "md5").islower()
