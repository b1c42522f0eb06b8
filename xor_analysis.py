"""
Statistical attacks on single-byte and repeating-key XOR
"""
import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional

from scoring import Scorer, score_english_by_frequency, score_english_by_words
from util import repeating_key_xor

log = logging.getLogger(__name__)

# Longest repeating key we bother looking for
MAX_KEY_SIZE = 40


def bitwise_hamming_distance(b1: bytes, b2: bytes) -> int:
    """
    Return the number of bits that must be changed in b1 to get b2

    If the inputs are of different length, the shorter one is treated as if it were padded with zero bytes, so the
    set bits of the longer input's tail all count towards the distance

    >>> bitwise_hamming_distance(b"HELLO", b"JELLO")
    1
    >>> bitwise_hamming_distance(b"hello", b"jello")
    1
    >>> bitwise_hamming_distance(b"AAAAA", b"JJJJA")
    12
    >>> bitwise_hamming_distance(b"this is a test", b"wokka wokka!!!")
    37
    >>> bitwise_hamming_distance(b"this is a test", b"this is a test")
    0
    >>> bitwise_hamming_distance(b"", bytes([0b1, 0b1]))
    2
    >>> bitwise_hamming_distance(bytes([0b1111, 0b11]), b"")
    6
    >>> bitwise_hamming_distance(b"AAAA", b"AAA") == bin(ord("A")).count("1")
    True
    """
    res = 0
    for a, b in itertools.zip_longest(b1, b2, fillvalue=0):
        x = a ^ b
        while x:
            res += x & 1
            x >>= 1
    return res


@dataclass
class KeySizeCandidate:
    key_size: int
    distance: float


def rank_key_sizes(ciphertext: bytes,
                   max_key_size: Optional[int] = None,
                   num_blocks: int = 2) -> List[KeySizeCandidate]:
    """
    Rank candidate repeating-XOR key sizes, most likely first

    For each key size k, the first num_blocks k-sized blocks of ciphertext are compared pairwise and the average
    hamming distance is normalized by k. Key sizes whose blocks would run off the end of the ciphertext are not
    considered. Equal distances are ranked lowest key size first

    >>> ciphertext = repeating_key_xor(b"A" * 64, b"ICE")
    >>> ranking = rank_key_sizes(ciphertext)
    >>> ranking[0]
    KeySizeCandidate(key_size=3, distance=0.0)
    >>> [c.key_size for c in ranking if c.distance == 0]
    [3, 6, 9, 12, 15, 18, 21, 24, 27, 30]
    >>> max(c.key_size for c in rank_key_sizes(ciphertext, num_blocks=4))
    16
    >>> rank_key_sizes(b"abc")
    []
    """
    if num_blocks < 2:
        raise ValueError("num_blocks must be at least 2")

    largest_possible = len(ciphertext) // num_blocks
    if max_key_size is None:
        max_key_size = MAX_KEY_SIZE
    max_key_size = min(max_key_size, largest_possible)

    candidates: List[KeySizeCandidate] = []
    for key_size in range(2, max_key_size + 1):
        blocks = [ciphertext[i * key_size:(i + 1) * key_size] for i in range(num_blocks)]
        pairs = list(itertools.combinations(blocks, 2))
        distance = sum(bitwise_hamming_distance(a, b) for a, b in pairs) / len(pairs) / key_size
        candidates.append(KeySizeCandidate(key_size=key_size, distance=distance))

    # sorted() is stable so ties stay in key size order
    candidates = sorted(candidates, key=lambda x: x.distance)
    for candidate in candidates[:5]:
        log.debug("Key size %d: normalized distance %.3f", candidate.key_size, candidate.distance)
    return candidates


def guess_repeating_xor_key_length(ciphertext: bytes,
                                   max_key_size: Optional[int] = None,
                                   num_blocks: int = 2) -> Optional[int]:
    """
    Given a ciphertext which is the result of applying repeating XOR with an unknown key of unknown length, guess
    the length of the key as the one with the smallest normalized inter-block hamming distance. Returns None if the
    ciphertext is too short to hold two blocks of any key size from 2 up

    Multiples of the real key size score just as well, so the real key size can be beaten by a multiple of itself
    on short or unlucky ciphertexts. Averaging over more blocks (num_blocks) makes the guess more reliable

    >>> guess_repeating_xor_key_length(repeating_key_xor(b"A" * 64, b"ICE"))
    3
    >>> guess_repeating_xor_key_length(repeating_key_xor(bytes(100), b"\\x01\\x02\\x03\\x04\\x05"), num_blocks=4)
    5
    >>> guess_repeating_xor_key_length(b"abc") is None
    True
    """
    ranking = rank_key_sizes(ciphertext, max_key_size=max_key_size, num_blocks=num_blocks)
    if not ranking:
        return None
    return ranking[0].key_size


@dataclass
class ScoredDecryptionResult:
    plaintext: bytes
    ciphertext: bytes
    key: int
    score: float

    def __repr__(self):
        return f"ScoredDecryptionResult(plaintext={self.plaintext}, ciphertext={self.ciphertext}, key={self.key:#02x}, score={self.score:.2f})"


def break_single_xor_cipher(ciphertext: bytes,
                            scoring_function: Scorer = score_english_by_frequency) -> Optional[ScoredDecryptionResult]:
    """
    Brute-force a single-byte XOR ciphertext, returning the decryption that scoring_function likes best. The lowest
    key wins a tie. Returns None if scoring_function rejects all 256 decryptions

    >>> ciphertext = bytes.fromhex("1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736")
    >>> result = break_single_xor_cipher(ciphertext)
    >>> result.plaintext
    b"Cooking MC's like a pound of bacon"
    >>> chr(result.key)
    'X'

    >>> udhr = (b"All human beings are born free and equal in dignity and rights. "
    ...         b"They are endowed with reason and conscience and should act towards one another in a spirit of "
    ...         b"brotherhood.")
    >>> result = break_single_xor_cipher(repeating_key_xor(udhr, b"B"), scoring_function=score_english_by_words)
    >>> result.plaintext == udhr
    True

    Every key leaves some of these bytes outside of printable ASCII

    >>> break_single_xor_cipher(bytes(range(255))) is None
    True
    """
    best: Optional[ScoredDecryptionResult] = None

    for k in range(256):
        plaintext = repeating_key_xor(ciphertext, bytes([k]))
        score = scoring_function(plaintext)
        if score is None:
            continue
        if best is None or score > best.score:
            log.debug("Better score %.3f with key %#04x: %r", score, k, plaintext)
            best = ScoredDecryptionResult(plaintext=plaintext,
                                          ciphertext=ciphertext,
                                          key=k,
                                          score=score)

    return best


def rank_single_xor_decryptions(ciphertexts: List[bytes],
                                scoring_function: Scorer = score_english_by_frequency) -> List[ScoredDecryptionResult]:
    """
    Brute-force every ciphertext in a list of single-byte XOR candidates. Return every decryption that
    scoring_function didn't reject, sorted best first

    Useful for finding the one ciphertext in a haystack which was actually encrypted with single-byte XOR

    Every key turns one of 0x00 and 0x80 into a non-ASCII byte, so the junk never decrypts to anything

    >>> needle = bytes.fromhex("1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736")
    >>> haystack = [bytes([0x00, 0x80]) * 8, needle, bytes(range(40)) + b"\\x80"]
    >>> ranking = rank_single_xor_decryptions(haystack)
    >>> all(x.ciphertext == needle for x in ranking)
    True
    >>> ranking[0].plaintext
    b"Cooking MC's like a pound of bacon"
    """
    decryptions: List[ScoredDecryptionResult] = []

    for ciphertext in ciphertexts:
        for k in range(256):
            plaintext = repeating_key_xor(ciphertext, bytes([k]))
            score = scoring_function(plaintext)
            if score is not None:
                decryptions.append(ScoredDecryptionResult(plaintext=plaintext,
                                                          ciphertext=ciphertext,
                                                          key=k,
                                                          score=score))

    return sorted(decryptions, key=lambda x: x.score, reverse=True)


def break_repeating_key_xor(ciphertext: bytes,
                            key_length: Optional[int] = None,
                            scoring_function: Scorer = score_english_by_frequency) -> Optional[bytes]:
    """
    Return the best-guess key for a ciphertext which has been encrypted using repeating key XOR

    Byte i of the ciphertext was encrypted with key byte i % key_length, so each such column of ciphertext is a
    single-byte XOR ciphertext which can be broken on its own. Returns None if any column can't be broken, or if
    key_length isn't given and can't be guessed

    @param ciphertext: The encrypted ciphertext
    @param key_length: (Optional) the key length, if known. If unknown, inter-block hamming distance will be used to derive it
    @param scoring_function: Used to break each column

    >>> plaintext = (b"It was the best of times, it was the worst of times, it was the age of wisdom, it was the age "
    ...              b"of foolishness, it was the epoch of belief, it was the epoch of incredulity, it was the season "
    ...              b"of light, it was the season of darkness, it was the spring of hope, it was the winter of "
    ...              b"despair, we had everything before us, we had nothing before us, we were all going direct to "
    ...              b"heaven, we were all going direct the other way. In short, the period was so far like the "
    ...              b"present period, that some of its noisiest authorities insisted on its being received, for good "
    ...              b"or for evil, in the superlative degree of comparison only.")
    >>> break_repeating_key_xor(repeating_key_xor(plaintext, b"ICE"), key_length=3)
    b'ICE'

    >>> break_repeating_key_xor(b"") is None
    True
    >>> break_repeating_key_xor(bytes(range(255)), key_length=1) is None
    True
    """
    if key_length is None:
        key_length = guess_repeating_xor_key_length(ciphertext)
        if key_length is None:
            return None
    if key_length < 1:
        raise ValueError("key_length must be at least 1")

    key: List[int] = []

    for i in range(key_length):
        column = ciphertext[i::key_length]
        if not column:
            return None
        result = break_single_xor_cipher(column, scoring_function=scoring_function)
        if result is None:
            return None
        key.append(result.key)

    return bytes(key)
