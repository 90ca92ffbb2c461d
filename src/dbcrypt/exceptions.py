"""Domain exceptions for encrypted string handling."""


class EncryptionError(Exception):
    """Base exception for all dbcrypt errors."""


class ConfigurationError(EncryptionError):
    """The algorithm provider is not usable with the supplied configuration."""


class ConfigurationMissingError(ConfigurationError):
    """The algorithm name or key was never supplied."""

    def __init__(self, setting: str) -> None:
        self.setting = setting
        super().__init__(f"Encryption configuration is missing: {setting}")


class InvalidConfigurationError(ConfigurationError):
    """The algorithm name is unknown or the key does not fit the algorithm."""


class MalformedTokenError(EncryptionError):
    """A stored value has no cipher/IV separator and cannot be a token."""


class InvalidEncodingError(EncryptionError):
    """A token segment is not valid base64."""

    def __init__(self, segment: str) -> None:
        self.segment = segment
        super().__init__(f"The {segment} segment of the cipher text is not valid base64")


class DecryptionFailedError(EncryptionError):
    """The cipher rejected the key, IV or cipher bytes."""


class NullArgumentError(EncryptionError, ValueError):
    """A required argument was None."""

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"{argument} must not be None")
