"""
AES-128 in ECB and CBC mode, the hard way, on top of the single-block primitive in aes_block

All plaintexts are padded with PKCS#7 before encryption and unpadded after decryption
"""
from enum import Enum
from secrets import choice, token_bytes, randbelow
from typing import Callable, List

from aes_block import BLOCK_SIZE, derive_decrypt_schedule, derive_encrypt_schedule
from pkcs7 import pad_pkcs7, unpad_pkcs7
from util import chunkify, fixed_xor, xor_inplace


class InvalidCiphertextError(ValueError):
    pass


def _check_ciphertext(ciphertext: bytes) -> None:
    if not ciphertext or len(ciphertext) % BLOCK_SIZE != 0:
        raise InvalidCiphertextError(f"Invalid ciphertext length: {len(ciphertext)}. "
                                     f"Must be non-empty and a multiple of {BLOCK_SIZE}")


def aes128_ecb_encrypt(plaintext: bytes, key: bytes) -> bytes:
    """
    Encrypt plaintext using AES-128 in ECB mode using the given key

    Automatically pads plaintext using PKCS#7

    >>> key = b"AZERTYUIOPASDFGH"
    >>> [len(aes128_ecb_encrypt(pt, key)) for pt in (b"", b"0", b"YELLOW SUBMARINE", b"banana banana banana")]
    [16, 16, 32, 32]

    Identical plaintext blocks make identical ciphertext blocks

    >>> ct = aes128_ecb_encrypt(b"YELLOW SUBMARINE" * 2, key)
    >>> ct[:16] == ct[16:32]
    True

    >>> aes128_ecb_encrypt(b"AAAA", key=b"too short")
    Traceback (most recent call last):
    aes_block.InvalidKeyError: Invalid key size (72) for AES-128
    """
    schedule = derive_encrypt_schedule(key)
    plaintext = pad_pkcs7(plaintext, BLOCK_SIZE)
    return b"".join(schedule.encrypt_block(chunk) for chunk in chunkify(plaintext, BLOCK_SIZE))


def aes128_ecb_decrypt(ciphertext: bytes, key: bytes) -> bytes:
    """
    Decrypt ciphertext using AES-128 in ECB mode using the given key

    Automatically unpads plaintext using PKCS#7

    >>> key = b"AZERTYUIOPASDFGH"
    >>> plaintexts = [b"", b"0", b"YELLOW SUBMARINE", b"banana banana banana"]
    >>> all(aes128_ecb_decrypt(aes128_ecb_encrypt(pt, key), key) == pt for pt in plaintexts)
    True

    >>> aes128_ecb_decrypt(b"too short", key=bytes(16))
    Traceback (most recent call last):
    aes_modes.InvalidCiphertextError: Invalid ciphertext length: 9. Must be non-empty and a multiple of 16

    >>> aes128_ecb_decrypt(b"", key=bytes(16))
    Traceback (most recent call last):
    aes_modes.InvalidCiphertextError: Invalid ciphertext length: 0. Must be non-empty and a multiple of 16

    >>> aes128_ecb_decrypt(b"A" * 16, key=b"too short")
    Traceback (most recent call last):
    aes_block.InvalidKeyError: Invalid key size (72) for AES-128
    """
    schedule = derive_decrypt_schedule(key)
    _check_ciphertext(ciphertext)
    plaintext = b"".join(schedule.decrypt_block(chunk) for chunk in chunkify(ciphertext, BLOCK_SIZE))
    return unpad_pkcs7(plaintext)


def aes128_cbc_encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    Encrypt plaintext using AES-128 in CBC mode (the hard way) using the given key

    Automatically pads plaintext using PKCS#7

    >>> key = b"YELLOW SUBMARINE"
    >>> iv = bytes(16)
    >>> plaintext = b"That's a lotta words, too bad I ain't reading em"
    >>> ciphertext = aes128_cbc_encrypt(plaintext, key=key, iv=iv)
    >>> len(ciphertext)
    64
    >>> aes128_cbc_decrypt(ciphertext, key=key, iv=iv) == plaintext
    True

    The first block is ECB of plaintext XOR IV

    >>> iv = b"ivIVivIVivIVivIV"
    >>> aes128_cbc_encrypt(b"", key, iv)[:16] == aes128_ecb_encrypt(fixed_xor(b"\\x10" * 16, iv), key)[:16]
    True

    Unlike ECB, repeated plaintext blocks don't repeat in the ciphertext

    >>> ct = aes128_cbc_encrypt(b"YELLOW SUBMARINE" * 2, key, iv)
    >>> ct[:16] == ct[16:32]
    False

    >>> aes128_cbc_encrypt(b"AAAA", key=b"too short", iv=bytes(16))
    Traceback (most recent call last):
    aes_block.InvalidKeyError: Invalid key size (72) for AES-128

    # This blows up when the IV is XOR'd into the first block
    >>> aes128_cbc_encrypt(b"AAAA", key=bytes(16), iv=b"too short")
    Traceback (most recent call last):
    util.LengthMismatchError: Arguments are of different length (16 != 9)
    """
    schedule = derive_encrypt_schedule(key)
    plaintext = pad_pkcs7(plaintext, BLOCK_SIZE)

    ciphertext: List[bytes] = []
    chain = iv
    for chunk in chunkify(plaintext, BLOCK_SIZE):
        chain = schedule.encrypt_block(fixed_xor(chunk, chain))
        ciphertext.append(chain)

    return b"".join(ciphertext)


def aes128_cbc_decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    Decrypt ciphertext using AES-128 in CBC mode (the hard way) using the given key

    Automatically unpads plaintext using PKCS#7

    >>> key = b"AZERTYUIOPASDFGH"
    >>> iv = b"ivIVivIVivIVivIV"
    >>> plaintexts = [b"", b"0", b"YELLOW SUBMARINE", b"banana banana banana"]
    >>> all(aes128_cbc_decrypt(aes128_cbc_encrypt(pt, key, iv), key, iv) == pt for pt in plaintexts)
    True

    Flipping a bit of the IV flips the same bit of the first plaintext block

    >>> plaintext = b"A" * 16 + b"Play that funky music"
    >>> ct = aes128_cbc_encrypt(plaintext, key, iv)
    >>> aes128_cbc_decrypt(ct, key, fixed_xor(iv, b"\\x01" + bytes(15)))[:16]
    b'@AAAAAAAAAAAAAAA'

    >>> aes128_cbc_decrypt(ct[:5], key=key, iv=iv)
    Traceback (most recent call last):
    aes_modes.InvalidCiphertextError: Invalid ciphertext length: 5. Must be non-empty and a multiple of 16

    >>> aes128_cbc_decrypt(b"A" * 16, key=b"too short", iv=bytes(16))
    Traceback (most recent call last):
    aes_block.InvalidKeyError: Invalid key size (72) for AES-128

    >>> aes128_cbc_decrypt(b"A" * 16, key=bytes(16), iv=b"too short")
    Traceback (most recent call last):
    util.LengthMismatchError: Arguments are of different length (16 != 9)
    """
    schedule = derive_decrypt_schedule(key)
    _check_ciphertext(ciphertext)

    plaintext = bytearray()
    chain = iv
    for chunk in chunkify(ciphertext, BLOCK_SIZE):
        block = bytearray(schedule.decrypt_block(chunk))
        xor_inplace(block, chain)
        plaintext += block
        # XOR the ciphertext block, not its decryption, into the next block
        chain = chunk

    return unpad_pkcs7(bytes(plaintext))


def identify_ciphertexts_encrypted_with_ecb(ciphertexts: List[bytes], block_size: int = BLOCK_SIZE) -> List[bytes]:
    """
    Given a list of ciphertexts, return the ciphertexts which were suspected to have been encrypted using
    a block cipher in ECB mode.

    This function assumes that _any_ redundancy on a block basis indicates ECB encryption.

    >>> key = token_bytes(16)
    >>> ecb = aes128_ecb_encrypt(b"A" * 48, key)
    >>> cbc = aes128_cbc_encrypt(b"A" * 48, key, iv=token_bytes(16))
    >>> identify_ciphertexts_encrypted_with_ecb([cbc, ecb, token_bytes(64)]) == [ecb]
    True
    """
    sus: List[bytes] = []
    for ciphertext in ciphertexts:
        chunks = list(chunkify(ciphertext, block_size))
        if len(chunks) != len(set(chunks)):
            sus.append(ciphertext)
    return sus


class BlockCipherMode(Enum):
    ECB = 0
    CBC = 1


class AES128EcbCbcOracle:
    """
    An oracle that randomly picks ECB or CBC mode (50/50 split) and then encrypts data using AES-128 in that mode
    using a random key (and random IV in the case of CBC mode), bookending the plaintext with 5-10 random bytes
    """
    mode: BlockCipherMode

    def __init__(self):
        self.mode = choice((BlockCipherMode.ECB, BlockCipherMode.CBC))

    def encrypt(self, plaintext: bytes) -> bytes:
        key = token_bytes(16)
        plaintext = token_bytes(randbelow(6) + 5) + plaintext + token_bytes(randbelow(6) + 5)

        if self.mode is BlockCipherMode.ECB:
            return aes128_ecb_encrypt(plaintext, key=key)
        return aes128_cbc_encrypt(plaintext, key=key, iv=token_bytes(16))


def determine_oracle_ecb_vs_cbc(oracle: Callable[[bytes], bytes]) -> BlockCipherMode:
    """
    Determines if the callable oracle is encrypting using ECB or CBC

    Three blocks of input guarantee two aligned identical blocks no matter how much junk the oracle
    prepends (as long as it's less than a block)

    >>> oracles = [AES128EcbCbcOracle() for _ in range(30)]
    >>> all(determine_oracle_ecb_vs_cbc(oracle.encrypt) is oracle.mode for oracle in oracles)
    True
    """
    ciphertext = oracle(b"A" * BLOCK_SIZE * 3)
    if identify_ciphertexts_encrypted_with_ecb([ciphertext]):
        return BlockCipherMode.ECB
    return BlockCipherMode.CBC
