from itertools import cycle
from typing import Generator


class LengthMismatchError(ValueError):
    pass


def chunkify(b: bytes, chunk_size: int) -> Generator[bytes, None, None]:
    """
    Yield chunk_size sized chunks from b

    >>> list(chunkify(b"ABCD", 2))
    [b'AB', b'CD']

    >>> list(chunkify(b"ABCDE", 2))
    [b'AB', b'CD', b'E']

    >>> list(chunkify(b"", 16))
    []
    """
    for i in range(0, len(b), chunk_size):
        yield b[i:i + chunk_size]


def fixed_xor(b1: bytes, b2: bytes) -> bytes:
    """
    Take two bytes arguments of equal length, return their XOR

    >>> arg1 = bytes.fromhex('1c0111001f010100061a024b53535009181c')
    >>> arg2 = bytes.fromhex('686974207468652062756c6c277320657965')
    >>> fixed_xor(arg1, arg2).hex()
    '746865206b696420646f6e277420706c6179'

    >>> fixed_xor(b"", b"")
    b''

    >>> fixed_xor(b"AAAA", b"A")
    Traceback (most recent call last):
    util.LengthMismatchError: Arguments are of different length (4 != 1)
    """
    if len(b1) != len(b2):
        raise LengthMismatchError(f"Arguments are of different length ({len(b1)} != {len(b2)})")
    return bytes(a ^ b for a, b in zip(b1, b2))


def xor_inplace(buf: bytearray, other: bytes) -> None:
    """
    XOR other into buf, modifying buf. Same rules as fixed_xor

    >>> buf = bytearray(b"\\x00\\x03\\x0a")
    >>> xor_inplace(buf, b"\\x03\\x01\\x0c")
    >>> bytes(buf)
    b'\\x03\\x02\\x06'

    >>> xor_inplace(bytearray(1), b"AAAA")
    Traceback (most recent call last):
    util.LengthMismatchError: Arguments are of different length (1 != 4)
    """
    if len(buf) != len(other):
        raise LengthMismatchError(f"Arguments are of different length ({len(buf)} != {len(other)})")
    for i, b in enumerate(other):
        buf[i] ^= b


def repeating_key_xor(data: bytes, key: bytes) -> bytes:
    """
    Cycle the key, XOR data with it. Encrypts and decrypts

    >>> plaintext = b"Burning 'em, if you ain't quick and nimble\\nI go crazy when I hear a cymbal"
    >>> repeating_key_xor(plaintext, b"ICE").hex()
    '0b3637272a2b2e63622c2e69692a23693a2a3c6324202d623d63343c2a26226324272765272a282b2f20430a652e2c652a3124333a653e2b2027630c692b20283165286326302e27282f'

    >>> list(repeating_key_xor(b"Everyone", b"is"))
    [44, 5, 12, 1, 16, 28, 7, 22]
    >>> list(repeating_key_xor(b"to", b"entitled"))
    [17, 1]
    >>> repeating_key_xor(b"", b"test")
    b''
    >>> repeating_key_xor(b"test", b"")
    Traceback (most recent call last):
    ValueError: key must be non-zero length
    """
    if not key:
        raise ValueError("key must be non-zero length")
    return bytes(a ^ b for a, b in zip(data, cycle(key)))
