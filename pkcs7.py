"""
PKCS#7 padding

https://www.ibm.com/docs/en/zos/2.4.0?topic=rules-pkcs-padding-method says:

    Padding bytes are always added to the clear text before it is encrypted.
    Each padding byte has a value equal to the total number of padding bytes that are added.
    The total number of padding bytes is at least one, and is the number that is required in order to bring the
    data length up to a multiple of the cipher algorithm block size.
"""


class PaddingError(ValueError):
    pass


class InvalidBlockSizeError(ValueError):
    pass


def pad_pkcs7(data: bytes, block_size: int) -> bytes:
    """
    >>> pad_pkcs7(b"YELLOW SUBMARINE", 20)
    b'YELLOW SUBMARINE\\x04\\x04\\x04\\x04'
    >>> pad_pkcs7(b"YELLOW SUBMARINE", 16)
    b'YELLOW SUBMARINE\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10'
    >>> pad_pkcs7(b"YELLOW SUBMARINE", 17)
    b'YELLOW SUBMARINE\\x01'
    >>> pad_pkcs7(b"", 4)
    b'\\x04\\x04\\x04\\x04'
    >>> pad_pkcs7(b"\\x01\\x02\\x03", 1)
    b'\\x01\\x02\\x03\\x01'

    The result is always a positive multiple of block_size ending in a run of n bytes of value n

    >>> all(len(pad_pkcs7(bytes(i), n)) % n == 0 and 1 <= pad_pkcs7(bytes(i), n)[-1] <= n
    ...     for n in (1, 2, 7, 16, 255) for i in range(40))
    True

    >>> pad_pkcs7(b"AAAA", 0)
    Traceback (most recent call last):
    pkcs7.InvalidBlockSizeError: Block size must be between 1 and 255, got 0
    >>> pad_pkcs7(b"AAAA", 256)
    Traceback (most recent call last):
    pkcs7.InvalidBlockSizeError: Block size must be between 1 and 255, got 256
    """
    if not 0 < block_size < 256:
        raise InvalidBlockSizeError(f"Block size must be between 1 and 255, got {block_size}")
    num_padding_bytes = block_size - len(data) % block_size
    return data + bytes([num_padding_bytes] * num_padding_bytes)


def unpad_pkcs7(data: bytes, strict: bool = True) -> bytes:
    """
    Strip PKCS#7 padding. With strict=False only the last byte is consulted

    >>> unpad_pkcs7(b"Hello, world!\\x02\\x02")
    b'Hello, world!'
    >>> unpad_pkcs7(pad_pkcs7(b"Beware of the hazmat", 100))
    b'Beware of the hazmat'
    >>> unpad_pkcs7(pad_pkcs7(b"", 16))
    b''
    >>> unpad_pkcs7(b"Hello, world!\\x01\\x02")
    Traceback (most recent call last):
    pkcs7.PaddingError: Bad padding in b'Hello, world!\\x01\\x02'
    >>> unpad_pkcs7(b"Hello, world!\\x01\\x02", strict=False)
    b'Hello, world!'
    >>> unpad_pkcs7(b"AAA\\x00")
    Traceback (most recent call last):
    pkcs7.PaddingError: Bad padding length 0 in b'AAA\\x00'
    >>> unpad_pkcs7(b"\\x05\\x05")
    Traceback (most recent call last):
    pkcs7.PaddingError: Bad padding length 5 in b'\\x05\\x05'
    >>> unpad_pkcs7(b"")
    Traceback (most recent call last):
    pkcs7.PaddingError: Can't unpad empty data
    """
    if not data:
        raise PaddingError("Can't unpad empty data")
    num_padding_bytes = data[-1]
    if num_padding_bytes == 0 or num_padding_bytes > len(data):
        raise PaddingError(f"Bad padding length {num_padding_bytes} in {data!r}")
    if strict:
        if any(b != num_padding_bytes for b in data[-num_padding_bytes:]):
            raise PaddingError(f"Bad padding in {data!r}")
    return data[:-num_padding_bytes]
