"""
Core bigram statistics for unsupervised word discovery.

Starting from a character-segmented corpus, adjacent tokens with a high
bigram product score are merged into new words:

    score(w1, w2) = P(w1, w2) / sqrt(P(w1) * P(w2))

Unigram probabilities use the total bigram count as denominator, under which
the score equals P(w1|w2) * P(w2|w1).
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

# Module-level logger
logger = logging.getLogger(__name__)

BIGRAM_SEPARATOR = " "


def bigram_key(w1: str, w2: str) -> str:
    return f"{w1}{BIGRAM_SEPARATOR}{w2}"


@dataclass
class CountsResult:
    """
    Bigram counts for one pass over the data.

    Attributes:
        bigram_counts: Maps ``"w1 w2"`` to the number of adjacent occurrences
        total_bigram_count: Number of adjacent pairs counted
        initial_data: Token sequence the counts were computed from
    """
    bigram_counts: Dict[str, int] = field(default_factory=dict)
    total_bigram_count: int = 0
    initial_data: List[str] = field(default_factory=list)


def compute_counts(data: List[str]) -> CountsResult:
    """
    Count every adjacent token pair in ``data``.

    Args:
        data: Ordered token sequence

    Returns:
        CountsResult with one count per adjacent pair and the data it was built from
    """
    counts: Dict[str, int] = {}
    total = 0
    for w1, w2 in zip(data, data[1:]):
        key = bigram_key(w1, w2)
        counts[key] = counts.get(key, 0) + 1
        total += 1
    logger.debug(f"Counted {total:,} bigrams ({len(counts):,} unique) over {len(data):,} tokens")
    return CountsResult(bigram_counts=counts, total_bigram_count=total, initial_data=list(data))


def convert_counts_to_probabilities(counts: CountsResult) -> Tuple[Dict[str, float], Dict[str, float]]:
    """
    Convert bigram counts into joint and marginal probability estimates.

    ``bigram_probs[k] = count(k) / total_bigram_count`` and every occurrence of a
    word in the counted data adds ``1 / total_bigram_count`` to its unigram
    probability.

    Args:
        counts: Result of :func:`compute_counts`

    Returns:
        Tuple of (bigram_probs, unigram_probs); both empty when no bigrams were counted
    """
    total = counts.total_bigram_count
    if total == 0:
        logger.warning("No bigrams counted; probabilities are empty")
        return {}, {}

    bigram_probs = {key: count / total for key, count in counts.bigram_counts.items()}
    unigram_probs = {word: n / total for word, n in Counter(counts.initial_data).items()}
    return bigram_probs, unigram_probs


def get_scores(bigram_probs: Dict[str, float], unigram_probs: Dict[str, float]) -> Dict[str, float]:
    """
    Compute the bigram product score of every bigram.

    Args:
        bigram_probs: Joint probability of each ``"w1 w2"`` key
        unigram_probs: Marginal probability of each word

    Returns:
        Maps each bigram key to ``P(w1, w2) / sqrt(P(w1) * P(w2))``

    Raises:
        ValueError: If a bigram word has no unigram probability
    """
    scores = {}
    for key, joint in bigram_probs.items():
        w1, w2 = key.split(BIGRAM_SEPARATOR)
        if w1 not in unigram_probs or w2 not in unigram_probs:
            raise ValueError(f"Bigram '{key}' has a word without unigram probability")
        scores[key] = joint / math.sqrt(unigram_probs[w1] * unigram_probs[w2])
    return scores


def find_new_words(
    bigram_counts: Dict[str, int],
    scores: Dict[str, float],
    count_threshold: int,
    probability_threshold: float
) -> Set[str]:
    """
    Select bigrams frequent and associated enough to become words.

    Args:
        bigram_counts: Maps bigram keys to counts
        scores: Maps bigram keys to product scores
        count_threshold: Minimum count (inclusive)
        probability_threshold: Minimum product score (inclusive)

    Returns:
        Set of merged words, i.e. qualifying keys with the whitespace removed
    """
    new_words = set()
    for key, count in bigram_counts.items():
        if count >= count_threshold and scores[key] >= probability_threshold:
            new_words.add("".join(key.split()))
    return new_words


def resegment(previous_data: List[str], new_words: Set[str]) -> List[str]:
    """
    Merge adjacent token pairs that form new words, left to right.

    Merges never overlap: once ``A`` and ``B`` are merged, ``B`` is not
    considered again, so ``A B C`` with both ``AB`` and ``BC`` gives ``AB C``.
    The input list is left unchanged.

    Args:
        previous_data: Current token sequence
        new_words: Words to form from adjacent pairs

    Returns:
        New token sequence whose concatenation equals that of ``previous_data``
    """
    new_data: List[str] = []
    tokens = iter(previous_data)
    prev = next(tokens, None)
    for token in tokens:
        combined = prev + token
        if combined in new_words:
            new_data.append(combined)
            prev = next(tokens, None)
        else:
            new_data.append(prev)
            prev = token
    if prev is not None:
        new_data.append(prev)
    return new_data


def get_vocabulary(data: List[str]) -> Dict[str, int]:
    """Map every token in ``data`` to its number of occurrences."""
    return dict(Counter(data))
