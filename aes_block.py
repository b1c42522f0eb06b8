"""
Bare AES-128 block permutation

The cryptography library does the actual AES. We only ever drive it in ECB mode one block at a time, so that the
block cipher modes in aes_modes can be built by hand on top of it.

A schedule wraps a cipher context which is created once per key and reused for every block. ECB contexts carry
no state between update() calls, so this is equivalent to keying AES afresh for each block.
"""
from cryptography.hazmat.primitives.ciphers import Cipher, CipherContext, algorithms, modes

# AES-128
BLOCK_SIZE = 16
KEY_SIZE = 16


class InvalidKeyError(ValueError):
    pass


class BlockSizeError(ValueError):
    pass


def _check_key(key: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise InvalidKeyError(f"Invalid key size ({len(key) * 8}) for AES-128")


def _check_block(block: bytes) -> None:
    if len(block) != BLOCK_SIZE:
        raise BlockSizeError(f"Block must be exactly {BLOCK_SIZE} bytes, got {len(block)}")


class EncryptSchedule:
    _context: CipherContext

    def __init__(self, key: bytes):
        _check_key(key)
        self._context = Cipher(algorithms.AES128(key), modes.ECB()).encryptor()

    def encrypt_block(self, block: bytes) -> bytes:
        _check_block(block)
        return self._context.update(block)


class DecryptSchedule:
    _context: CipherContext

    def __init__(self, key: bytes):
        _check_key(key)
        self._context = Cipher(algorithms.AES128(key), modes.ECB()).decryptor()

    def decrypt_block(self, block: bytes) -> bytes:
        _check_block(block)
        return self._context.update(block)


def derive_encrypt_schedule(key: bytes) -> EncryptSchedule:
    """
    >>> derive_encrypt_schedule(b"too short")
    Traceback (most recent call last):
    aes_block.InvalidKeyError: Invalid key size (72) for AES-128

    AES-256 keys are not AES-128 keys

    >>> derive_encrypt_schedule(bytes(32))
    Traceback (most recent call last):
    aes_block.InvalidKeyError: Invalid key size (256) for AES-128
    """
    return EncryptSchedule(key)


def derive_decrypt_schedule(key: bytes) -> DecryptSchedule:
    """
    >>> derive_decrypt_schedule(b"")
    Traceback (most recent call last):
    aes_block.InvalidKeyError: Invalid key size (0) for AES-128
    """
    return DecryptSchedule(key)


def encrypt_block(block: bytes, schedule: EncryptSchedule) -> bytes:
    """
    Encrypt exactly one block

    FIPS-197 Appendix C.1 known answer

    >>> key = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
    >>> pt = bytes.fromhex("00112233445566778899aabbccddeeff")
    >>> encrypt_block(pt, derive_encrypt_schedule(key)).hex()
    '69c4e0d86a7b0430d8cdb78070b4c55a'

    The schedule is reusable and block operations are independent of each other

    >>> schedule = derive_encrypt_schedule(key)
    >>> encrypt_block(pt, schedule) == encrypt_block(pt, schedule)
    True

    >>> encrypt_block(b"A" * 17, schedule)
    Traceback (most recent call last):
    aes_block.BlockSizeError: Block must be exactly 16 bytes, got 17
    """
    return schedule.encrypt_block(block)


def decrypt_block(block: bytes, schedule: DecryptSchedule) -> bytes:
    """
    Decrypt exactly one block

    >>> key = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
    >>> ct = bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a")
    >>> decrypt_block(ct, derive_decrypt_schedule(key)).hex()
    '00112233445566778899aabbccddeeff'

    >>> decrypt_block(b"", derive_decrypt_schedule(key))
    Traceback (most recent call last):
    aes_block.BlockSizeError: Block must be exactly 16 bytes, got 0
    """
    return schedule.decrypt_block(block)
