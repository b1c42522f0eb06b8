"""
Byte-at-a-time ECB decryption

Given an oracle computing AES-128-ECB(attacker-controlled || unknown-secret, unknown-key) with the same key every
time, recover unknown-secret without ever learning the key.
"""
import base64
import itertools
import logging
from secrets import token_bytes
from typing import Callable, Dict, List, Tuple

from aes_block import BLOCK_SIZE, KEY_SIZE
from aes_modes import aes128_ecb_encrypt

log = logging.getLogger(__name__)


class OracleMismatchError(Exception):
    pass


class Aes128EcbAppendAndEncryptOracle:
    suffix: bytes
    key: bytes
    verbose: bool

    def __init__(self, suffix: bytes, verbose: bool = False):
        self.key = token_bytes(KEY_SIZE)
        self.suffix = suffix
        self.verbose = verbose

    def encrypt(self, prefix: bytes) -> bytes:
        ct = aes128_ecb_encrypt(prefix + self.suffix, key=self.key)
        if self.verbose:
            print(f"Encrypt: {prefix!r} --> {ct[:5]!r}...")
        return ct


def discover_block_size_and_suffix_len(oracle: Callable[[bytes], bytes]) -> Tuple[int, int]:
    """
    Feed the oracle longer and longer prefixes until the ciphertext grows by a block

    >>> discover_block_size_and_suffix_len(Aes128EcbAppendAndEncryptOracle(suffix=b"A" * 8).encrypt)
    (16, 8)
    >>> discover_block_size_and_suffix_len(Aes128EcbAppendAndEncryptOracle(suffix=b"A" * 24).encrypt)
    (16, 24)
    >>> discover_block_size_and_suffix_len(Aes128EcbAppendAndEncryptOracle(suffix=b"").encrypt)
    (16, 0)
    """
    base_len_ct = len(oracle(b""))
    for i in itertools.count(1):
        new_len = len(oracle(b"Z" * i))
        if new_len != base_len_ct:
            block_size = new_len - base_len_ct
            suffix_len = new_len - block_size - i
            return block_size, suffix_len


def crack_ecb(generator: Callable[[bytes], bytes]) -> bytes:
    """
    Recover the secret that generator appends to its input before encrypting it with AES-128-ECB under a fixed key

    Blocks of the secret are solved in order. To solve a byte, the oracle is fed a bait window short enough that
    the byte lands last in a block whose other 15 bytes are already known (the tail of the previous block plus the
    bytes solved so far in this block, or zeroes while solving the first block). Encrypting all 256 possible
    completions of those 15 bytes gives a dictionary of fingerprints, and the oracle's block gets looked up in it.

    Past the end of the secret the oracle's own padding gets in the way: the first padding byte is always \\x01 and
    is recovered like any other byte, then the next lookup fails because that byte has turned into \\x02. A failed
    lookup in the last block therefore marks the end of the secret. The last block always holds at least one byte
    of padding, so when a secret is one byte short of a block boundary the \\x01 is the last byte of the last block
    and there is no lookup left to fail. It gets dropped all the same. A failed lookup in any other block means the
    oracle isn't doing ECB under a fixed key and raises OracleMismatchError

    >>> flag = "Um9sbGluJyBpbiBteSA1LjAKV2l0aCBteSByYWctdG9wIGRvd24gc28gbXkgaGFpciBjYW4gYmxvdwpUaGUgZ2lybGllcyBvbiBzdGFuZGJ5IHdhdmluZyBqdXN0IHRvIHNheSBoaQpEaWQgeW91IHN0b3A/IE5vLCBJIGp1c3QgZHJvdmUgYnkK"
    >>> flag = base64.b64decode(flag.encode())
    >>> oracle = Aes128EcbAppendAndEncryptOracle(suffix=flag)
    >>> crack_ecb(oracle.encrypt) == flag
    True

    Secrets that end on, or short of, a block boundary

    >>> all(crack_ecb(Aes128EcbAppendAndEncryptOracle(suffix=s).encrypt) == s
    ...     for s in (b"YELLOW SUBMARINE", b"YELLOW SUBMARINE" * 2, b"\\x00\\x01\\x02", b"YELLOW SUBMARINE\\x01", b""))
    True
    >>> [crack_ecb(Aes128EcbAppendAndEncryptOracle(suffix=s).encrypt) for s in (b"A" * 15, b"YELLOW SUBMARINE" + b"B" * 15)]
    [b'AAAAAAAAAAAAAAA', b'YELLOW SUBMARINEBBBBBBBBBBBBBBB']

    An oracle that changes its key between calls can't be attacked

    >>> crack_ecb(lambda prefix: aes128_ecb_encrypt(prefix + flag, key=token_bytes(16)))
    Traceback (most recent call last):
    ecb_oracle.OracleMismatchError: No fingerprint matched byte 0 of block 0 of 9
    """
    number_of_blocks = len(generator(b"")) // BLOCK_SIZE

    plaintexts: List[bytes] = []
    for block_idx in range(number_of_blocks):
        bait = plaintexts[-1] if plaintexts else bytes(BLOCK_SIZE)
        plain_block = bytearray()

        for byte_idx in range(BLOCK_SIZE):
            bait = bait[1:]

            candidates: Dict[bytes, int] = {}
            for c in range(256):
                fingerprint = generator(bait + plain_block + bytes([c]))[:BLOCK_SIZE]
                candidates[fingerprint] = c

            offset = len(plaintexts) * BLOCK_SIZE
            actual = generator(bait)[offset:offset + BLOCK_SIZE]

            if actual not in candidates:
                if block_idx == number_of_blocks - 1:
                    # We've run into the oracle's padding. The last byte we recovered was its first padding byte
                    del plain_block[-1:]
                    plaintexts.append(bytes(plain_block))
                    log.info("Reached the end of the secret after %d bytes", sum(map(len, plaintexts)))
                    return b"".join(plaintexts)
                raise OracleMismatchError(f"No fingerprint matched byte {byte_idx} of block {block_idx} "
                                          f"of {number_of_blocks}")

            plain_block.append(candidates[actual])
            log.debug("Block %d byte %d: %#04x", block_idx, byte_idx, candidates[actual])

        if block_idx == number_of_blocks - 1:
            # The secret ended one byte short of the block boundary so the last byte is the oracle's \x01
            del plain_block[-1:]
        plaintexts.append(bytes(plain_block))
        log.info("Recovered block %d of %d: %r", block_idx + 1, number_of_blocks, plaintexts[-1])

    return b"".join(plaintexts)
