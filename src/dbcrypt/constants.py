"""Centralized constants for the dbcrypt package."""

# --- Token format ---

TOKEN_SEPARATOR = "@"
TEXT_ENCODING = "utf-8"

# --- Algorithms ---

DEFAULT_ALGORITHM = "AES"

# Accepted algorithm names (lower-cased) mapped to the canonical name.
ALGORITHM_ALIASES: dict[str, str] = {
    "aes": "AES",
    "rijndael": "AES",
    "system.security.cryptography.aes": "AES",
    "system.security.cryptography.aesmanaged": "AES",
    "system.security.cryptography.aescryptoserviceprovider": "AES",
    "system.security.cryptography.rijndaelmanaged": "AES",
    "camellia": "Camellia",
}

# Valid key lengths in bytes per canonical algorithm.
KEY_SIZES: dict[str, frozenset[int]] = {
    "AES": frozenset({16, 24, 32}),
    "Camellia": frozenset({16, 24, 32}),
}

# Cipher bytes are fed to the decryptor in chunks of this many blocks.
DECRYPT_CHUNK_BLOCKS = 256

# --- Environment ---

ENV_KEY = "DBCRYPT_KEY"

# --- Messages ---

MALFORMED_TOKEN_MESSAGE = "The cipher text is not in the expected format <cipher>@<iv>"
