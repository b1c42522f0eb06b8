#!/usr/bin/env python3
import logging
from typing import Optional

from util import repeating_key_xor
from xor_analysis import break_repeating_key_xor, guess_repeating_xor_key_length, rank_key_sizes

"""
Break repeating-key XOR

Encrypt a passage of English under a repeating key, then get it back knowing nothing about the key:

    Guess the key size from the normalized hamming distance between the first few key-size sized blocks.
    Transpose the ciphertext into one column per key byte.
    Solve each column as if it was single-byte XOR.
"""

KEY = b"YELLOW"

PASSAGE = (b"It was the best of times, it was the worst of times, it was the age of wisdom, it was the age of "
           b"foolishness, it was the epoch of belief, it was the epoch of incredulity, it was the season of light, "
           b"it was the season of darkness, it was the spring of hope, it was the winter of despair, we had "
           b"everything before us, we had nothing before us, we were all going direct to heaven, we were all going "
           b"direct the other way. In short, the period was so far like the present period, that some of its "
           b"noisiest authorities insisted on its being received, for good or for evil, in the superlative degree "
           b"of comparison only. There were a king with a large jaw and a queen with a plain face, on the throne "
           b"of England; there were a king with a large jaw and a queen with a fair face, on the throne of France. "
           b"In both countries it was clearer than crystal to the lords of the State preserves of loaves and "
           b"fishes, that things in general were settled for ever.")


def recover_key(ciphertext: bytes) -> Optional[bytes]:
    """
    Break the ciphertext using the key size that wins when the first four blocks are compared

    Comparing only the first two blocks of English ciphertext tends to land on a multiple of the key size

    >>> ciphertext = repeating_key_xor(PASSAGE, KEY)
    >>> guess_repeating_xor_key_length(ciphertext) % len(KEY)
    0
    >>> guess_repeating_xor_key_length(ciphertext, num_blocks=4)
    6
    >>> recover_key(ciphertext)
    b'YELLOW'
    """
    key_length = guess_repeating_xor_key_length(ciphertext, num_blocks=4)
    if key_length is None:
        return None
    return break_repeating_key_xor(ciphertext, key_length=key_length)


def main():
    logging.basicConfig(level=logging.INFO)

    ciphertext = repeating_key_xor(PASSAGE, KEY)

    ranking = rank_key_sizes(ciphertext, num_blocks=4)
    print("Most likely key sizes:")
    for candidate in ranking[:5]:
        print(f"  {candidate.key_size:2}: {candidate.distance:.3f}")

    key = recover_key(ciphertext)
    if key is None:
        print("Failed to break the ciphertext")
        return
    print(f"Key: {key!r}")
    print(repeating_key_xor(ciphertext, key).decode(errors="replace"))


if __name__ == "__main__":
    main()
