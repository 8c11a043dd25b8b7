"""
Lexigraph Wordifier Package

Unsupervised word segmentation: adjacent tokens with a high bigram product
score are merged into new words, iteratively.

Key modules:
- core: Bigram counts, probabilities, product scores, discovery and resegmentation
- iteration: Multi-pass discovery driver
- loaders: Corpus and dictionary loading
- report: Dictionary hit reporting
- validation: Count and resegmentation consistency checks
"""

from .core import (
    CountsResult,
    compute_counts,
    convert_counts_to_probabilities,
    get_scores,
    find_new_words,
    resegment,
    get_vocabulary
)

from .iteration import (
    wordify_iteration,
    wordify
)

from .loaders import (
    tokenize,
    load_sentences,
    load_dictionary
)

from .report import (
    words_discovered,
    print_num_words_discovered
)

from .validation import (
    validate_bigram_totals,
    validate_resegmentation
)

__all__ = [
    # Core functions
    "CountsResult",
    "compute_counts",
    "convert_counts_to_probabilities",
    "get_scores",
    "find_new_words",
    "resegment",
    "get_vocabulary",

    # Iteration
    "wordify_iteration",
    "wordify",

    # Loaders
    "tokenize",
    "load_sentences",
    "load_dictionary",

    # Reporting
    "words_discovered",
    "print_num_words_discovered",

    # Validation
    "validate_bigram_totals",
    "validate_resegmentation"
]
