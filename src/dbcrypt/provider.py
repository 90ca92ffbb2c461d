"""Symmetric algorithm configuration and the provider that hands out cipher handles."""

import logging
import os
from dataclasses import dataclass, field
from typing import Protocol, Self

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, CipherContext, algorithms, modes

from dbcrypt.constants import ALGORITHM_ALIASES, KEY_SIZES
from dbcrypt.exceptions import ConfigurationMissingError, InvalidConfigurationError, NullArgumentError
from dbcrypt.settings import EncryptionSettings

logger = logging.getLogger(__name__)

_ALGORITHMS: dict[str, type[algorithms.AES] | type[algorithms.Camellia]] = {
    "AES": algorithms.AES,
    "Camellia": algorithms.Camellia,
}


@dataclass(frozen=True, slots=True)
class AlgorithmConfig:
    """Canonical algorithm name paired with its key.

    Validated on construction: the name is resolved to its canonical form and
    the key length checked against the algorithm, so an instance is always
    usable by :class:`SymmetricAlgorithmProvider`.

    Raises:
        ConfigurationMissingError: If the name or key is missing or empty.
        InvalidConfigurationError: If the algorithm is unsupported or the key
            length does not suit it.
    """

    algorithm_name: str
    key: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not self.algorithm_name or not self.algorithm_name.strip():
            raise ConfigurationMissingError("algorithm_name")
        if not self.key:
            raise ConfigurationMissingError("key")

        canonical = ALGORITHM_ALIASES.get(self.algorithm_name.strip().lower())
        if canonical is None:
            raise InvalidConfigurationError(f"Unsupported algorithm: {self.algorithm_name}")

        key = bytes(self.key)
        if len(key) not in KEY_SIZES[canonical]:
            sizes = ", ".join(str(size) for size in sorted(KEY_SIZES[canonical]))
            raise InvalidConfigurationError(f"{canonical} key must be {sizes} bytes, got {len(key)}")

        object.__setattr__(self, "algorithm_name", canonical)
        object.__setattr__(self, "key", key)


def build_algorithm_config(algorithm_name: str | None, key: bytes | None) -> AlgorithmConfig:
    """Validate an algorithm name and key and freeze them into an :class:`AlgorithmConfig`.

    The name is matched case-insensitively against the supported algorithms,
    including .NET-style names such as ``System.Security.Cryptography.AesManaged``.
    """
    return AlgorithmConfig(algorithm_name=algorithm_name, key=key)  # type: ignore[arg-type]


class CryptoTransform:
    """Streaming transform combining the CBC cipher context with PKCS7 padding.

    Feed data through :meth:`update` and call :meth:`finalize` exactly once.
    Errors from the cipher or padding surface as ``ValueError``.
    """

    def __init__(
        self,
        cipher_context: CipherContext,
        padding_context: padding.PaddingContext,
        *,
        encrypting: bool,
    ) -> None:
        self._cipher = cipher_context
        self._padding = padding_context
        self._encrypting = encrypting

    def update(self, data: bytes) -> bytes:
        if self._encrypting:
            return self._cipher.update(self._padding.update(data))
        return self._padding.update(self._cipher.update(data))

    def finalize(self) -> bytes:
        if self._encrypting:
            return self._cipher.update(self._padding.finalize()) + self._cipher.finalize()
        return self._padding.update(self._cipher.finalize()) + self._padding.finalize()


class SymmetricAlgorithm:
    """A single-use cipher handle: key, IV and transform factories.

    Uses CBC mode with PKCS7 padding. Use as a context manager so the key and
    IV references are released when the operation finishes::

        with provider.create_algorithm() as algorithm:
            algorithm.generate_iv()
            encryptor = algorithm.create_encryptor()
    """

    def __init__(self, algorithm_name: str, key: bytes) -> None:
        self._algorithm_name = algorithm_name
        self._algorithm_cls = _ALGORITHMS[algorithm_name]
        self._key: bytes | None = key
        self._iv: bytes | None = None

    @property
    def algorithm_name(self) -> str:
        return self._algorithm_name

    @property
    def block_size(self) -> int:
        """Block size in bytes, which is also the required IV length."""
        return self._algorithm_cls.block_size // 8

    @property
    def closed(self) -> bool:
        return self._key is None

    @property
    def key(self) -> bytes:
        self._check_open()
        return self._key  # type: ignore[return-value]

    @property
    def iv(self) -> bytes:
        """The IV; a random one is generated on first access if none was set."""
        self._check_open()
        if self._iv is None:
            self.generate_iv()
        return self._iv  # type: ignore[return-value]

    @iv.setter
    def iv(self, value: bytes) -> None:
        self._check_open()
        if value is None:
            raise NullArgumentError("iv")
        if len(value) != self.block_size:
            raise ValueError(f"IV must be {self.block_size} bytes for {self._algorithm_name}, got {len(value)}")
        self._iv = bytes(value)

    def generate_iv(self) -> None:
        """Replace the IV with fresh cryptographically random bytes."""
        self._check_open()
        self._iv = os.urandom(self.block_size)

    def create_encryptor(self) -> CryptoTransform:
        cipher = self._cipher()
        return CryptoTransform(
            cipher.encryptor(),
            padding.PKCS7(self._algorithm_cls.block_size).padder(),
            encrypting=True,
        )

    def create_decryptor(self) -> CryptoTransform:
        cipher = self._cipher()
        return CryptoTransform(
            cipher.decryptor(),
            padding.PKCS7(self._algorithm_cls.block_size).unpadder(),
            encrypting=False,
        )

    def close(self) -> None:
        self._key = None
        self._iv = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _cipher(self) -> Cipher:
        return Cipher(self._algorithm_cls(self.key), modes.CBC(self.iv))

    def _check_open(self) -> None:
        if self._key is None:
            raise ValueError("Operation on a released SymmetricAlgorithm")


class AlgorithmProvider(Protocol):
    """Supplies a freshly configured cipher handle per encrypt/decrypt call."""

    def create_algorithm(self) -> SymmetricAlgorithm: ...


class SymmetricAlgorithmProvider:
    """Creates :class:`SymmetricAlgorithm` handles from a fixed configuration.

    Every call to :meth:`create_algorithm` returns a new, independent handle,
    so one provider can be shared across threads.

    Usage:
        provider = SymmetricAlgorithmProvider(build_algorithm_config("AES", key))

        # Or from DBCRYPT_ALGORITHM / DBCRYPT_KEY
        provider = SymmetricAlgorithmProvider.from_env()
    """

    def __init__(self, config: AlgorithmConfig) -> None:
        if config is None:
            raise NullArgumentError("config")
        if not isinstance(config, AlgorithmConfig):
            raise TypeError(f"Expected an AlgorithmConfig, got {type(config).__name__}")
        self._config = config
        logger.debug("Configured %s algorithm provider", config.algorithm_name)

    @classmethod
    def from_settings(cls, settings: EncryptionSettings) -> Self:
        """Create a provider from :class:`EncryptionSettings`.

        Raises:
            ConfigurationError: If the settings lack a usable algorithm or key.
        """
        return cls(build_algorithm_config(settings.DBCRYPT_ALGORITHM, settings.key_bytes()))

    @classmethod
    def from_env(cls) -> Self:
        """Create a provider from environment variables."""
        return cls.from_settings(EncryptionSettings())

    @property
    def algorithm_name(self) -> str:
        return self._config.algorithm_name

    def create_algorithm(self) -> SymmetricAlgorithm:
        return SymmetricAlgorithm(self._config.algorithm_name, self._config.key)
