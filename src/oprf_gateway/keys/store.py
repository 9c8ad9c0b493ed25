"""
File-backed key store for the server evaluation key.

Key file format is the base64 encoding of the serialized scalar, optionally
prefixed with the suite identifier:

    P384-SHA384:<base64 scalar>      (tagged, written by default)
    <base64 scalar>                  (untagged)

Surrounding whitespace is ignored. Decoded bytes are validated against the
configured suite so a key produced for another suite fails at load time
rather than deep inside the arithmetic.
"""

import base64
import binascii
import logging
import os
import stat
from pathlib import Path
from typing import Tuple, Union

from ..config.runtime import is_production
from ..errors import KeyLoadError
from ..primitives import DEFAULT_SUITE, Suite, i2osp
from ..protocol.context import derive_key_pair_dst
from .secret import SecretKey

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class KeyStore:
    """
    Loads, generates and persists OPRF secret keys for one suite.

    Keys are read once at startup; the returned SecretKey is immutable.
    """

    def __init__(self, suite: Suite = DEFAULT_SUITE):
        self.suite = suite

    def load(self, path: PathLike) -> SecretKey:
        """
        Read and validate the key file at path.

        Raises:
            KeyLoadError: If the file is missing or unreadable, is not valid
                base64, carries another suite's tag, or does not encode a
                valid scalar for the suite
        """
        key_path = Path(path).resolve()
        try:
            content = key_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise KeyLoadError(f"Failed to read secret key file: {key_path}") from e

        tag, encoded = self._split_tag(content.strip(), key_path)
        if tag is None:
            if is_production():
                logger.warning(
                    "Secret key file %s has no suite tag; assuming %s",
                    key_path,
                    self.suite.value,
                )
        elif tag != self.suite:
            raise KeyLoadError(
                f"Secret key file {key_path} is for {tag.value}, configured suite is {self.suite.value}"
            )

        try:
            material = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise KeyLoadError(f"Secret key file {key_path} is not valid base64") from e

        try:
            key = SecretKey(suite=self.suite, material=material)
        except ValueError as e:
            raise KeyLoadError(
                f"Secret key file {key_path} is not a valid {self.suite.value} key: {e}"
            ) from e

        self._check_permissions(key_path)
        logger.info("Loaded %s secret key %s from %s", self.suite.value, key.fingerprint(), key_path)
        return key

    def generate(self) -> SecretKey:
        """Random key for the suite."""
        group = self.suite.group
        return SecretKey(suite=self.suite, material=group.serialize_scalar(group.sample_scalar()))

    def derive(self, seed: bytes, info: bytes = b"") -> SecretKey:
        """
        Deterministic key derivation (RFC 9497 DeriveKeyPair).

        Raises:
            ValueError: If no non-zero scalar is found within 256 attempts
        """
        group = self.suite.group
        derive_input = bytes(seed) + i2osp(len(info), 2) + bytes(info)
        dst = derive_key_pair_dst(self.suite)

        for counter in range(256):
            scalar = group.hash_to_scalar(derive_input + i2osp(counter, 1), dst)
            if scalar != 0:
                return SecretKey(suite=self.suite, material=group.serialize_scalar(scalar))
        raise ValueError("DeriveKeyPair failed to produce a non-zero scalar")

    def save(self, key: SecretKey, path: PathLike, tagged: bool = True) -> Path:
        """Write key to path with owner-only permissions."""
        if key.suite != self.suite:
            raise ValueError(f"Key is for {key.suite.value}, store is {self.suite.value}")

        key_path = Path(path)
        key_path.parent.mkdir(parents=True, exist_ok=True)
        encoded = base64.b64encode(key.material).decode("ascii")
        text = f"{key.suite.value}:{encoded}" if tagged else encoded

        fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        os.chmod(key_path, 0o600)

        logger.info("Stored %s secret key %s at %s", key.suite.value, key.fingerprint(), key_path)
        return key_path

    @staticmethod
    def _split_tag(content: str, key_path: Path) -> Tuple[Union[Suite, None], str]:
        if ":" not in content:
            return None, content
        label, _, encoded = content.partition(":")
        try:
            return Suite.parse(label), encoded.strip()
        except ValueError as e:
            raise KeyLoadError(f"Secret key file {key_path} has an unknown suite tag") from e

    @staticmethod
    def _check_permissions(key_path: Path) -> None:
        try:
            mode = stat.S_IMODE(key_path.stat().st_mode)
        except OSError:
            return
        if mode & 0o077:
            logger.warning(
                "Secret key file %s is accessible by group/others (mode %o)", key_path, mode
            )


def load_secret_key(path: PathLike, suite: Suite = DEFAULT_SUITE) -> SecretKey:
    """Shortcut for KeyStore(suite).load(path)."""
    return KeyStore(suite).load(path)
