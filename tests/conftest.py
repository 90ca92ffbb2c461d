"""Shared test configuration and fixtures for dbcrypt tests."""

import base64
import os

import pytest

from dbcrypt.codec import EncryptedStringCodec
from dbcrypt.provider import AlgorithmConfig, SymmetricAlgorithmProvider, build_algorithm_config
from tests.helpers import RecordingProvider


@pytest.fixture
def aes_key() -> bytes:
    """Fixed AES-256 key so tokens are reproducible across providers."""
    return bytes(range(32))


@pytest.fixture
def aes_key_b64(aes_key: bytes) -> str:
    return base64.b64encode(aes_key).decode()


@pytest.fixture
def aes_config(aes_key: bytes) -> AlgorithmConfig:
    return build_algorithm_config("AES", aes_key)


@pytest.fixture
def provider(aes_config: AlgorithmConfig) -> SymmetricAlgorithmProvider:
    return SymmetricAlgorithmProvider(aes_config)


@pytest.fixture
def codec(provider: SymmetricAlgorithmProvider) -> EncryptedStringCodec:
    return EncryptedStringCodec(provider)


@pytest.fixture
def other_codec() -> EncryptedStringCodec:
    """A codec configured with a different random key."""
    return EncryptedStringCodec(SymmetricAlgorithmProvider(build_algorithm_config("AES", os.urandom(32))))


@pytest.fixture
def recording_provider(provider: SymmetricAlgorithmProvider) -> RecordingProvider:
    return RecordingProvider(provider)
