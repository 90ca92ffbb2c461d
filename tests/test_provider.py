"""Tests for algorithm configuration, cipher handles and the provider."""

import pytest
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from dbcrypt.exceptions import ConfigurationMissingError, InvalidConfigurationError, NullArgumentError
from dbcrypt.provider import AlgorithmConfig, SymmetricAlgorithmProvider, build_algorithm_config
from dbcrypt.settings import EncryptionSettings


class TestBuildAlgorithmConfig:
    def test_valid_config(self, aes_key: bytes) -> None:
        config = build_algorithm_config("AES", aes_key)
        assert config.algorithm_name == "AES"
        assert config.key == aes_key

    @pytest.mark.parametrize(
        "name",
        ["aes", "Rijndael", "System.Security.Cryptography.AesManaged", "  AES  "],
    )
    def test_aliases_resolve_to_aes(self, name: str, aes_key: bytes) -> None:
        assert build_algorithm_config(name, aes_key).algorithm_name == "AES"

    def test_camellia(self, aes_key: bytes) -> None:
        assert build_algorithm_config("camellia", aes_key[:16]).algorithm_name == "Camellia"

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_missing_name(self, name: str | None, aes_key: bytes) -> None:
        with pytest.raises(ConfigurationMissingError) as exc_info:
            build_algorithm_config(name, aes_key)
        assert exc_info.value.setting == "algorithm_name"

    @pytest.mark.parametrize("key", [None, b""])
    def test_missing_key(self, key: bytes | None) -> None:
        with pytest.raises(ConfigurationMissingError) as exc_info:
            build_algorithm_config("AES", key)
        assert exc_info.value.setting == "key"

    def test_unknown_algorithm(self, aes_key: bytes) -> None:
        with pytest.raises(InvalidConfigurationError, match="Unsupported algorithm"):
            build_algorithm_config("ROT13", aes_key)

    def test_bad_key_length(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="got 10"):
            build_algorithm_config("AES", b"0123456789")

    def test_config_is_frozen(self, aes_key: bytes) -> None:
        config = build_algorithm_config("AES", aes_key)
        with pytest.raises(AttributeError):
            config.key = b"x" * 32  # type: ignore[misc]

    def test_repr_hides_key(self, aes_key: bytes) -> None:
        assert repr(aes_key) not in repr(build_algorithm_config("AES", aes_key))


class TestAlgorithmConfigValidation:
    """Constructing AlgorithmConfig directly is validated the same way as the builder."""

    def test_empty_key(self) -> None:
        with pytest.raises(ConfigurationMissingError) as exc_info:
            AlgorithmConfig("AES", b"")
        assert exc_info.value.setting == "key"

    def test_empty_name(self, aes_key: bytes) -> None:
        with pytest.raises(ConfigurationMissingError):
            AlgorithmConfig("", aes_key)

    def test_unknown_algorithm(self, aes_key: bytes) -> None:
        with pytest.raises(InvalidConfigurationError, match="Unsupported algorithm"):
            AlgorithmConfig("Foo", aes_key)

    def test_bad_key_length(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            AlgorithmConfig("AES", b"short")

    def test_alias_is_canonicalised(self, aes_key: bytes) -> None:
        config = AlgorithmConfig("rijndael", bytearray(aes_key))  # type: ignore[arg-type]
        assert config.algorithm_name == "AES"
        assert config.key == aes_key
        assert isinstance(config.key, bytes)

    def test_direct_config_encrypts(self, aes_key: bytes) -> None:
        provider = SymmetricAlgorithmProvider(AlgorithmConfig("AES", aes_key))
        with provider.create_algorithm() as algorithm:
            encryptor = algorithm.create_encryptor()
            assert len(encryptor.update(b"x") + encryptor.finalize()) == 16


class TestSymmetricAlgorithm:
    def test_block_size_and_key(self, provider: SymmetricAlgorithmProvider, aes_key: bytes) -> None:
        with provider.create_algorithm() as algorithm:
            assert algorithm.algorithm_name == "AES"
            assert algorithm.block_size == 16
            assert algorithm.key == aes_key

    def test_generate_iv_is_random(self, provider: SymmetricAlgorithmProvider) -> None:
        with provider.create_algorithm() as algorithm:
            algorithm.generate_iv()
            first = algorithm.iv
            algorithm.generate_iv()
            assert len(first) == 16
            assert algorithm.iv != first

    def test_iv_generated_on_first_access(self, provider: SymmetricAlgorithmProvider) -> None:
        with provider.create_algorithm() as algorithm:
            assert len(algorithm.iv) == 16

    def test_iv_length_checked(self, provider: SymmetricAlgorithmProvider) -> None:
        with provider.create_algorithm() as algorithm:
            with pytest.raises(ValueError, match="IV must be 16 bytes"):
                algorithm.iv = b"short"

    def test_iv_none_rejected(self, provider: SymmetricAlgorithmProvider) -> None:
        with provider.create_algorithm() as algorithm:
            with pytest.raises(NullArgumentError):
                algorithm.iv = None  # type: ignore[assignment]

    def test_released_after_context(self, provider: SymmetricAlgorithmProvider) -> None:
        with provider.create_algorithm() as algorithm:
            pass
        assert algorithm.closed
        with pytest.raises(ValueError, match="released"):
            algorithm.create_encryptor()

    def test_transforms_match_cbc_pkcs7(self, provider: SymmetricAlgorithmProvider, aes_key: bytes) -> None:
        """Encryptor output equals AES-CBC with PKCS7 padding computed directly."""
        iv = bytes(16)
        with provider.create_algorithm() as algorithm:
            algorithm.iv = iv
            encryptor = algorithm.create_encryptor()
            produced = encryptor.update(b"hello ") + encryptor.update(b"world") + encryptor.finalize()

        padder = padding.PKCS7(128).padder()
        padded = padder.update(b"hello world") + padder.finalize()
        reference = Cipher(algorithms.AES(aes_key), modes.CBC(iv)).encryptor()
        assert produced == reference.update(padded) + reference.finalize()

        with provider.create_algorithm() as algorithm:
            algorithm.iv = iv
            decryptor = algorithm.create_decryptor()
            assert decryptor.update(produced) + decryptor.finalize() == b"hello world"


class TestSymmetricAlgorithmProvider:
    def test_new_handle_per_call(self, provider: SymmetricAlgorithmProvider) -> None:
        first = provider.create_algorithm()
        second = provider.create_algorithm()
        assert first is not second
        first.close()
        assert not second.closed
        second.close()

    def test_none_config_rejected(self) -> None:
        with pytest.raises(NullArgumentError) as exc_info:
            SymmetricAlgorithmProvider(None)  # type: ignore[arg-type]
        assert exc_info.value.argument == "config"

    def test_non_config_rejected(self) -> None:
        with pytest.raises(TypeError):
            SymmetricAlgorithmProvider(("AES", b"\x00" * 32))  # type: ignore[arg-type]

    def test_algorithm_name(self, aes_config: AlgorithmConfig) -> None:
        assert SymmetricAlgorithmProvider(aes_config).algorithm_name == "AES"

    def test_from_settings(self, aes_key: bytes, aes_key_b64: str) -> None:
        settings = EncryptionSettings(DBCRYPT_ALGORITHM="Rijndael", DBCRYPT_KEY=aes_key_b64)
        provider = SymmetricAlgorithmProvider.from_settings(settings)
        with provider.create_algorithm() as algorithm:
            assert algorithm.algorithm_name == "AES"
            assert algorithm.key == aes_key

    def test_from_settings_without_key_fails_fast(self) -> None:
        with pytest.raises(ConfigurationMissingError):
            SymmetricAlgorithmProvider.from_settings(EncryptionSettings(DBCRYPT_KEY=""))

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, aes_key: bytes, aes_key_b64: str) -> None:
        monkeypatch.setenv("DBCRYPT_ALGORITHM", "AES")
        monkeypatch.setenv("DBCRYPT_KEY", aes_key_b64)
        provider = SymmetricAlgorithmProvider.from_env()
        with provider.create_algorithm() as algorithm:
            assert algorithm.key == aes_key
