"""
Dictionary hit reporting for discovered vocabularies.
"""

import sys
from typing import Dict, List, Optional, Set, TextIO, Tuple


def words_discovered(vocab: Dict[str, int], dictionary: Set[str]) -> List[Tuple[str, int]]:
    """Vocabulary entries that are dictionary words, in ascending lexical order."""
    return [(word, vocab[word]) for word in sorted(vocab) if word in dictionary]


def print_num_words_discovered(
    vocab: Dict[str, int],
    dictionary: Set[str],
    file: Optional[TextIO] = None
) -> Tuple[int, int]:
    """
    Print every discovered dictionary word with its count, then the totals.

    Args:
        vocab: Maps words to their number of occurrences
        dictionary: Reference words
        file: Output stream (defaults to stdout)

    Returns:
        Tuple of (unique words discovered, count-weighted total)
    """
    out = file if file is not None else sys.stdout
    matches = words_discovered(vocab, dictionary)
    for word, count in matches:
        print(f"Discovered {word} (count {count})", file=out)

    unique_words = len(matches)
    total_words = sum(count for _, count in matches)
    print(f"Number of unique words discovered: {unique_words}", file=out)
    print(f"Total number words discovered: {total_words}", file=out)
    return unique_words, total_words
