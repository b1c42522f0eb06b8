"""
English-likeness scoring for candidate plaintexts

A scorer takes a candidate plaintext and returns None if it contains a byte that can't appear in English text,
else a score where higher means more English-like. Scores are only comparable between calls to the same scorer.
"""
import logging
import string
from math import inf
from typing import Callable, Optional

log = logging.getLogger(__name__)

Scorer = Callable[[bytes], Optional[float]]

PLAINTEXT_BYTES = frozenset(string.printable.encode())


def is_plaintext_byte(b: int) -> bool:
    """
    ASCII letters, digits, punctuation and whitespace

    >>> is_plaintext_byte(ord("A")), is_plaintext_byte(ord("\\n")), is_plaintext_byte(ord("~"))
    (True, True, True)
    >>> is_plaintext_byte(0), is_plaintext_byte(0x7f), is_plaintext_byte(0xe9)
    (False, False, False)
    """
    return b in PLAINTEXT_BYTES


# https://pi.math.cornell.edu/~mec/2003-2004/cryptography/subs/frequencies.html
en_char_frequencies = {'E': 0.1202, 'T': 0.091, 'A': 0.0812, 'O': 0.0768, 'I': 0.0731, 'N': 0.0695, 'S': 0.0628,
                       'R': 0.0602, 'H': 0.0592, 'D': 0.0432, 'L': 0.0398, 'U': 0.0288, 'C': 0.0271, 'M': 0.0261,
                       'F': 0.023, 'Y': 0.0211, 'W': 0.0209, 'G': 0.0203, 'P': 0.0182, 'B': 0.0149, 'V': 0.0111,
                       'K': 0.0069, 'X': 0.0017, 'Q': 0.0011, 'J': 0.001, 'Z': 0.0008}


def chi_squared(observed_count: float, expected_count: float) -> float:
    """
    Return the chi squared test result for a given observed and expected count. If observed and expected are equal
    the chi squared test result is zero, else it increases as the delta between the counts increase. i.e. bigger
    number == worse match

    https://en.wikipedia.org/wiki/Chi-squared_test

    >>> abs(chi_squared(90, 80.54) - 1.11) < .01
    True
    >>> chi_squared(3, 0)
    inf
    """
    if expected_count == 0:
        if observed_count == 0:
            return 1
        else:
            return inf
    return (observed_count - expected_count) ** 2 / expected_count


def score_english_by_frequency(text: bytes) -> Optional[float]:
    """
    Score text by how closely its letter counts match English letter frequencies (case-insensitive). Punctuation,
    digits and whitespace are not scored but still count towards the length of the text

    >>> score_english_by_frequency(b"Now that the party is jumping") > score_english_by_frequency(b"Zqx vjk wqzz xjqv")
    True
    >>> score_english_by_frequency(b"Hello\\x00world") is None
    True

    Each candidate is logged with its score at DEBUG

    >>> import sys
    >>> handler = logging.StreamHandler(sys.stdout)
    >>> log.addHandler(handler); log.setLevel(logging.DEBUG)
    >>> score_english_by_frequency(b"")
    score_english_by_frequency b'': -26.000
    -26.0
    >>> log.removeHandler(handler); log.setLevel(logging.NOTSET)
    """
    if not all(b in PLAINTEXT_BYTES for b in text):
        return None

    len_text = len(text)
    upper = text.upper()

    score = 0.0
    for c, expected_frequency in en_char_frequencies.items():
        score -= chi_squared(upper.count(ord(c)), expected_frequency * len_text)

    log.debug("score_english_by_frequency %r: %.3f", text, score)

    return score


COMMON_WORDS = frozenset([b"the", b"to", b"of", b"and", b"a", b"in", b"that", b"have", b"i"])

# https://www3.nd.edu/~busiforc/handouts/cryptography/letterfrequencies.html
# e, a, r, i, o, t make up about half of the letters in typical English text
FREQUENT_LETTERS = frozenset(b"eariot")

_SEPARATORS = (string.whitespace + string.punctuation).encode()
_SEPARATORS_TO_SPACE = bytes.maketrans(_SEPARATORS, b" " * len(_SEPARATORS))


def score_english_by_words(text: bytes) -> Optional[float]:
    """
    Score text as the sum of three components, each of which is 1 for very English-like text:

    * The fraction of a handful of very common English words that appear in the text
    * How evenly letters split between "eariot" and all the others (0 when all letters fall in one bucket)
    * How close the average word length is to 4.5 (0 at 0 or 9 letters, unbounded below for longer words)

    A component with nothing to measure (no letters, no words) scores 0

    >>> score_english_by_words(b"Hello world, This is a weird test") > score_english_by_words(b"aaaBBB")
    True
    >>> score_english_by_words(b"Hello world. This is not a test") > score_english_by_words(b"yesyesyesyes")
    True
    >>> score_english_by_words(b"Hello world. This is not a test") > score_english_by_words(b"CCCvdd jdsdsdg suy yes of DDDDNNN")
    True
    >>> score_english_by_words(b"Hello\\x00world") is None
    True
    >>> score_english_by_words(b"... !!!")
    0.0
    """
    if not all(b in PLAINTEXT_BYTES for b in text):
        return None

    lower = text.lower()

    frequent_letters = 0
    other_letters = 0
    for b in lower:
        if b in FREQUENT_LETTERS:
            frequent_letters += 1
        elif 0x61 <= b <= 0x7a:
            other_letters += 1

    if frequent_letters + other_letters:
        frequency_score = 1 - 2 * abs(frequent_letters / (frequent_letters + other_letters) - 0.5)
    else:
        frequency_score = 0.0

    words = set(lower.translate(_SEPARATORS_TO_SPACE).split(b" "))
    common_word_score = len(words & COMMON_WORDS) / len(COMMON_WORDS)

    # https://www.researchgate.net/figure/Dynamics-of-average-length-of-short-and-long-words_fig2_230764201
    word_lengths = [len(w) for w in words if w]
    if word_lengths:
        average_word_length = sum(word_lengths) / len(word_lengths)
        average_word_length_score = 1 - abs(average_word_length - 4.5) / 4.5
    else:
        average_word_length_score = 0.0

    log.debug("score_english_by_words %r: common %.3f frequency %.3f word length %.3f",
              text, common_word_score, frequency_score, average_word_length_score)

    return common_word_score + frequency_score + average_word_length_score
