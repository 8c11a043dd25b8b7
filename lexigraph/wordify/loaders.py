"""
Text loaders for the wordifier.

Input corpora are character-segmented plain text (one or more tokens per line,
separated by whitespace); dictionaries list reference words the same way.
"""

import logging
from pathlib import Path
from typing import List, Set, Union

logger = logging.getLogger(__name__)


def tokenize(text: str) -> List[str]:
    """Split text into whitespace-separated tokens."""
    return text.split()


def load_sentences(text_filename: Union[str, Path]) -> List[str]:
    """
    Load every token of a text file, in order.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(text_filename)
    data: List[str] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            data.extend(tokenize(line))
    logger.info(f"Loaded {len(data):,} tokens from {path}")
    return data


def load_dictionary(dictionary_filename: Union[str, Path]) -> Set[str]:
    """
    Load the set of unique words of a dictionary file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(dictionary_filename)
    words: Set[str] = set()
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            words.update(tokenize(line))
    logger.info(f"Loaded {len(words):,} dictionary words from {path}")
    return words
