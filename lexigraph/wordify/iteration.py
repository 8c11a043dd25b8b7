"""
Iterative word discovery.

Each iteration recounts bigrams over the current segmentation, scores them,
merges the pairs that pass both thresholds and feeds the resegmented data into
the next iteration. Discovery stops early once an iteration finds no new words.
"""

import logging
from typing import List, Tuple

from lexigraph.schema.wordifier_stats import WordifierIterationStats
from .core import (
    compute_counts,
    convert_counts_to_probabilities,
    get_scores,
    find_new_words,
    resegment,
    get_vocabulary
)

# Module-level logger - will inherit from pipeline setup
logger = logging.getLogger(__name__)


def wordify_iteration(
    data: List[str],
    iteration: int,
    count_threshold: int,
    probability_threshold: float
) -> Tuple[List[str], WordifierIterationStats]:
    """
    Run one counts -> probabilities -> scores -> discovery -> resegment pass.

    Args:
        data: Current token sequence
        iteration: 1-based iteration number, used for reporting
        count_threshold: Minimum bigram count for a new word
        probability_threshold: Minimum bigram product score for a new word

    Returns:
        Tuple of (resegmented data, iteration statistics)
    """
    counts = compute_counts(data)
    bigram_probs, unigram_probs = convert_counts_to_probabilities(counts)
    scores = get_scores(bigram_probs, unigram_probs)
    new_words = find_new_words(counts.bigram_counts, scores, count_threshold, probability_threshold)
    new_data = resegment(data, new_words) if new_words else list(data)

    stats = WordifierIterationStats(
        iteration=iteration,
        tokens_before=len(data),
        tokens_after=len(new_data),
        unique_bigrams=len(counts.bigram_counts),
        total_bigrams=counts.total_bigram_count,
        new_words=sorted(new_words),
        vocabulary_size=len(get_vocabulary(new_data))
    )
    return new_data, stats


def wordify(
    data: List[str],
    iterations: int,
    count_threshold: int,
    probability_threshold: float
) -> Tuple[List[str], List[WordifierIterationStats]]:
    """
    Discover words by repeatedly merging high-association bigrams.

    Args:
        data: Initial token sequence (typically single characters)
        iterations: Maximum number of iterations
        count_threshold: Minimum bigram count for a new word
        probability_threshold: Minimum bigram product score for a new word

    Returns:
        Tuple of (final token sequence, per-iteration statistics)
    """
    logger.info(
        f"Starting word discovery: {len(data):,} tokens, up to {iterations} iterations "
        f"(count >= {count_threshold}, score >= {probability_threshold})"
    )
    history: List[WordifierIterationStats] = []
    current = list(data)

    for iteration in range(1, iterations + 1):
        current, stats = wordify_iteration(current, iteration, count_threshold, probability_threshold)
        history.append(stats)

        logger.info(
            f"  Iteration {iteration}: {len(stats.new_words)} new words, "
            f"{stats.tokens_before:,} -> {stats.tokens_after:,} tokens ({stats.format_compression()} merged), "
            f"vocabulary {stats.vocabulary_size:,}"
        )
        if stats.new_words:
            logger.debug(f"    New words: {stats.new_words[:20]}")
        else:
            logger.info(f"  No new words found; stopping after iteration {iteration}")
            break

    return current, history
