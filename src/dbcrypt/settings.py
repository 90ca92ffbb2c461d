"""Encryption settings loaded from environment variables."""

import base64
import functools

from pydantic_settings import BaseSettings

from dbcrypt.constants import DEFAULT_ALGORITHM, ENV_KEY
from dbcrypt.exceptions import ConfigurationMissingError, InvalidConfigurationError


class EncryptionSettings(BaseSettings):
    """Algorithm name and base64 key used to build the algorithm provider."""

    DBCRYPT_ALGORITHM: str = DEFAULT_ALGORITHM
    DBCRYPT_KEY: str = ""  # standard base64, e.g. 32 bytes for AES-256

    model_config = {"env_prefix": ""}

    def key_bytes(self) -> bytes:
        """Decode the configured key.

        Raises:
            ConfigurationMissingError: If no key is configured.
            InvalidConfigurationError: If the key is not valid base64.
        """
        if not self.DBCRYPT_KEY:
            raise ConfigurationMissingError(ENV_KEY)
        try:
            return base64.b64decode(self.DBCRYPT_KEY, validate=True)
        except ValueError as exc:  # binascii.Error, or non-ASCII input
            raise InvalidConfigurationError(f"{ENV_KEY} is not valid base64") from exc


@functools.lru_cache(maxsize=1)
def get_settings() -> EncryptionSettings:
    """Return cached encryption settings singleton."""
    return EncryptionSettings()
