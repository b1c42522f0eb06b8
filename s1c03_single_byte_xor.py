#!/usr/bin/env python3
import logging

from scoring import score_english_by_frequency, score_english_by_words
from xor_analysis import break_single_xor_cipher

"""
Single-byte XOR cipher

The hex encoded string below has been XOR'd against a single character. Find the key, decrypt the message.

Both English scorers should agree on the answer.
"""

CIPHERTEXT = bytes.fromhex("1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736")


def main():
    logging.basicConfig(level=logging.INFO)

    for scoring_function in (score_english_by_frequency, score_english_by_words):
        result = break_single_xor_cipher(CIPHERTEXT, scoring_function=scoring_function)
        print(f"{scoring_function.__name__}: {result}")


if __name__ == "__main__":
    main()
