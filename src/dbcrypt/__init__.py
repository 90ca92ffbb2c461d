"""Transparent encryption of string columns -- convenience re-exports."""

from dbcrypt.codec import EncryptedStringCodec
from dbcrypt.converters import ConverterRegistry, ValueConverter, register_encrypted_string
from dbcrypt.exceptions import (
    ConfigurationError,
    ConfigurationMissingError,
    DecryptionFailedError,
    EncryptionError,
    InvalidConfigurationError,
    InvalidEncodingError,
    MalformedTokenError,
    NullArgumentError,
)
from dbcrypt.provider import (
    AlgorithmConfig,
    AlgorithmProvider,
    SymmetricAlgorithm,
    SymmetricAlgorithmProvider,
    build_algorithm_config,
)
from dbcrypt.settings import EncryptionSettings, get_settings
from dbcrypt.types import EncryptedStringType
from dbcrypt.wrapped import EncryptedString, unwrap, wrap

__all__ = [
    # Value type
    "EncryptedString",
    "unwrap",
    "wrap",
    # Provider
    "AlgorithmConfig",
    "AlgorithmProvider",
    "SymmetricAlgorithm",
    "SymmetricAlgorithmProvider",
    "build_algorithm_config",
    # Codec
    "EncryptedStringCodec",
    # Persistence
    "ConverterRegistry",
    "EncryptedStringType",
    "ValueConverter",
    "register_encrypted_string",
    # Settings
    "EncryptionSettings",
    "get_settings",
    # Exceptions
    "ConfigurationError",
    "ConfigurationMissingError",
    "DecryptionFailedError",
    "EncryptionError",
    "InvalidConfigurationError",
    "InvalidEncodingError",
    "MalformedTokenError",
    "NullArgumentError",
]
