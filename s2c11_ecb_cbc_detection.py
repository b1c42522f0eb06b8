#!/usr/bin/env python3
import logging

from aes_modes import AES128EcbCbcOracle, determine_oracle_ecb_vs_cbc

"""
An ECB/CBC detection oracle

Write a function that encrypts data under an unknown key, with 5-10 random bytes before and after the plaintext,
using ECB half the time and CBC (with a random IV) the other half.

Detect the block cipher mode the function is using each time.
"""


def main():
    logging.basicConfig(level=logging.INFO)

    n = 30
    correct = 0
    for _ in range(n):
        oracle = AES128EcbCbcOracle()
        guessed_mode = determine_oracle_ecb_vs_cbc(oracle.encrypt)
        print(f"Guessed {guessed_mode.name}, was {oracle.mode.name}")
        correct += guessed_mode is oracle.mode
    print(f"{correct}/{n} correct")


if __name__ == "__main__":
    main()
