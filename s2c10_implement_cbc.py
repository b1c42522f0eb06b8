#!/usr/bin/env python3
import logging
from secrets import token_bytes

from aes_block import BLOCK_SIZE
from aes_modes import aes128_cbc_decrypt, aes128_cbc_encrypt, aes128_ecb_encrypt
from util import chunkify

"""
Implement CBC mode

CBC mode is a block cipher mode that allows us to encrypt irregularly-sized messages, despite the fact that a
block cipher natively only transforms individual blocks.

In CBC mode, each ciphertext block is added to the next plaintext block before the next call to the cipher core.
The first plaintext block, which has no associated previous ciphertext block, is added to a "fake 0th ciphertext
block" called the initialization vector, or IV.

Show that, unlike ECB, CBC hides repeated plaintext blocks.
"""

KEY = b"YELLOW SUBMARINE"
IV = bytes(BLOCK_SIZE)


def main():
    logging.basicConfig(level=logging.INFO)

    plaintext = b"YELLOW SUBMARINE" * 3 + b"Play that funky music"

    for name, ciphertext in (("ECB", aes128_ecb_encrypt(plaintext, key=KEY)),
                             ("CBC", aes128_cbc_encrypt(plaintext, key=KEY, iv=IV))):
        print(f"{name}:")
        for chunk in chunkify(ciphertext, BLOCK_SIZE):
            print(f"  {chunk.hex()}")

    iv = token_bytes(BLOCK_SIZE)
    ciphertext = aes128_cbc_encrypt(plaintext, key=KEY, iv=iv)
    print(f"Round trip with a random IV: {aes128_cbc_decrypt(ciphertext, key=KEY, iv=iv)!r}")


if __name__ == "__main__":
    main()
