import pytest
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from chunkcrypt.core.crypto.chacha20 import ChaCha20Cipher, SealedChunk
from chunkcrypt.core.errors import AuthenticationError, InvalidInputError

NONCE = bytes(range(12))


@pytest.fixture
def cipher() -> ChaCha20Cipher:
    return ChaCha20Cipher()


def test_round_trip(cipher, key):
    sealed = cipher.encrypt_chunk(key, NONCE, b"attack at dawn")

    assert isinstance(sealed, SealedChunk)
    assert len(sealed.ciphertext) == len(b"attack at dawn")
    assert len(sealed.tag) == 16
    assert cipher.decrypt_chunk(key, NONCE, sealed.ciphertext, sealed.tag) == b"attack at dawn"


def test_matches_combined_aead_output(cipher, key):
    sealed = cipher.encrypt_chunk(key, NONCE, b"x" * 100)

    combined = ChaCha20Poly1305(key).encrypt(NONCE, b"x" * 100, None)
    assert sealed.ciphertext + sealed.tag == combined


def test_encryption_is_deterministic(cipher, key):
    first = cipher.encrypt_chunk(key, NONCE, b"same input")
    second = cipher.encrypt_chunk(key, NONCE, b"same input")

    assert first == second


def test_accepts_bytearray_plaintext(cipher, key):
    sealed = cipher.encrypt_chunk(key, NONCE, bytearray(b"mutable"))

    assert cipher.decrypt_chunk(key, NONCE, bytearray(sealed.ciphertext), sealed.tag) == b"mutable"


def test_flipped_ciphertext_bit_fails_authentication(cipher, key):
    sealed = cipher.encrypt_chunk(key, NONCE, b"important data")
    tampered = bytearray(sealed.ciphertext)
    tampered[3] ^= 0x01

    with pytest.raises(AuthenticationError):
        cipher.decrypt_chunk(key, NONCE, bytes(tampered), sealed.tag)


def test_wrong_tag_fails_authentication(cipher, key):
    sealed = cipher.encrypt_chunk(key, NONCE, b"important data")

    with pytest.raises(AuthenticationError):
        cipher.decrypt_chunk(key, NONCE, sealed.ciphertext, bytes(16))


def test_wrong_key_fails_authentication(cipher, key):
    sealed = cipher.encrypt_chunk(key, NONCE, b"important data")

    with pytest.raises(AuthenticationError):
        cipher.decrypt_chunk(ChaCha20Cipher.generate_key(), NONCE, sealed.ciphertext, sealed.tag)


def test_wrong_nonce_fails_authentication(cipher, key):
    sealed = cipher.encrypt_chunk(key, NONCE, b"important data")

    with pytest.raises(AuthenticationError):
        cipher.decrypt_chunk(key, bytes(12), sealed.ciphertext, sealed.tag)


@pytest.mark.parametrize("bad_key", [b"", bytes(16), bytes(31), bytes(33)])
def test_rejects_bad_key_length(cipher, bad_key):
    with pytest.raises(InvalidInputError):
        cipher.encrypt_chunk(bad_key, NONCE, b"data")


def test_rejects_bad_nonce_length(cipher, key):
    with pytest.raises(InvalidInputError):
        cipher.encrypt_chunk(key, bytes(8), b"data")
    with pytest.raises(InvalidInputError):
        cipher.decrypt_chunk(key, bytes(24), b"data", bytes(16))


def test_rejects_bad_tag_length(cipher, key):
    with pytest.raises(InvalidInputError):
        cipher.decrypt_chunk(key, NONCE, b"data", bytes(15))


def test_invalid_input_is_a_value_error(cipher):
    with pytest.raises(ValueError):
        cipher.encrypt_chunk(bytes(5), NONCE, b"data")


def test_generate_key_and_support_probe():
    assert len(ChaCha20Cipher.generate_key()) == 32
    assert ChaCha20Cipher.generate_key() != ChaCha20Cipher.generate_key()
    assert ChaCha20Cipher.is_supported() is True


def test_repr_hides_data(cipher, key):
    sealed = cipher.encrypt_chunk(key, NONCE, b"secret")

    assert "secret" not in repr(sealed)
    assert sealed.tag.hex() not in repr(sealed)
