import pytest

from chunkcrypt.core.memory import ZeroizeContext, secure_zero


def test_secure_zero_bytearray():
    buffer = bytearray(b"plaintext chunk")
    secure_zero(buffer)

    assert buffer == bytearray(len(b"plaintext chunk"))


def test_secure_zero_memoryview():
    buffer = bytearray(b"abc")
    secure_zero(memoryview(buffer))

    assert buffer == bytearray(3)


def test_secure_zero_empty_buffer():
    buffer = bytearray()
    secure_zero(buffer)

    assert buffer == bytearray()


def test_zeroize_context_wipes_on_error():
    buffer = bytearray(b"secret")

    with pytest.raises(RuntimeError):
        with ZeroizeContext(buffer):
            raise RuntimeError("boom")

    assert buffer == bytearray(6)
