#!/usr/bin/env python3
import base64
import logging

from ecb_oracle import Aes128EcbAppendAndEncryptOracle, crack_ecb, discover_block_size_and_suffix_len

"""
Byte-at-a-time ECB decryption (Simple)

Make a function that produces AES-128-ECB(your-string || unknown-string, random-key), using the same random key
every time.

It turns out you can decrypt unknown-string with repeated calls to the function, without ever decrypting anything
yourself.
"""

FLAG = ("Um9sbGluJyBpbiBteSA1LjAKV2l0aCBteSByYWctdG9wIGRvd24gc28gbXkgaGFpciBjYW4gYmxvdwpUaGUgZ2lybGllcyBvbiBzdGFu"
        "ZGJ5IHdhdmluZyBqdXN0IHRvIHNheSBoaQpEaWQgeW91IHN0b3A/IE5vLCBJIGp1c3QgZHJvdmUgYnkK")


def main():
    logging.basicConfig(level=logging.INFO)

    flag = base64.b64decode(FLAG.encode())
    oracle = Aes128EcbAppendAndEncryptOracle(suffix=flag, verbose=True)

    block_size, suffix_len = discover_block_size_and_suffix_len(oracle.encrypt)
    print(f"Block size {block_size}, unknown string is {suffix_len} bytes")

    # Cracking takes hundreds of queries per byte
    oracle.verbose = False

    res = crack_ecb(oracle.encrypt)
    print(res.decode())
    assert res == flag, "Oops"


if __name__ == "__main__":
    main()
