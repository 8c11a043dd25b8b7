"""
Validation functions for word discovery.
"""

from typing import Dict, List, Union

from .core import CountsResult


def validate_bigram_totals(counts: CountsResult) -> None:
    """
    Validate that bigram counts agree with the counted data.

    Raises:
        ValueError: If the total differs from the sum of counts or from the
            number of adjacent pairs in the data
    """
    summed = sum(counts.bigram_counts.values())
    if summed != counts.total_bigram_count:
        raise ValueError(f"Bigram counts sum to {summed}, total_bigram_count is {counts.total_bigram_count}")

    expected = max(0, len(counts.initial_data) - 1)
    if counts.total_bigram_count != expected:
        raise ValueError(f"Data has {expected} adjacent pairs, counted {counts.total_bigram_count}")


def validate_resegmentation(before: List[str], after: List[str]) -> Dict[str, Union[int, float]]:
    """
    Validate that resegmentation only merged tokens.

    Returns:
        Dictionary with merge statistics

    Raises:
        ValueError: If the text changed or the token count grew
    """
    if "".join(before) != "".join(after):
        raise ValueError("Resegmentation changed the underlying text")
    if len(after) > len(before):
        raise ValueError(f"Resegmentation grew the data from {len(before)} to {len(after)} tokens")
    if any(not token for token in after):
        raise ValueError("Resegmentation produced an empty token")

    return {
        "tokens_before": len(before),
        "tokens_after": len(after),
        "merges": len(before) - len(after),
        "avg_token_length": sum(len(t) for t in after) / len(after) if after else 0.0
    }
