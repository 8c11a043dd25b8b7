"""
Wordifier Iteration Statistics Schema

This module defines the per-iteration record produced by the word discovery
loop and helpers for formatting it in reports.
"""

from typing import Dict, Any, List
from dataclasses import dataclass, field


@dataclass
class WordifierIterationStats:
    """
    Schema for a single wordifier iteration.

    Attributes:
        iteration: 1-based iteration number
        tokens_before: Number of tokens before resegmentation
        tokens_after: Number of tokens after resegmentation
        unique_bigrams: Number of distinct bigram keys counted
        total_bigrams: Total number of adjacent pairs counted
        new_words: Words discovered in this iteration, sorted
        vocabulary_size: Number of distinct tokens after resegmentation
    """
    iteration: int
    tokens_before: int
    tokens_after: int
    unique_bigrams: int
    total_bigrams: int
    new_words: List[str] = field(default_factory=list)
    vocabulary_size: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WordifierIterationStats':
        """Create WordifierIterationStats from dictionary."""
        return cls(
            iteration=data['iteration'],
            tokens_before=data['tokens_before'],
            tokens_after=data['tokens_after'],
            unique_bigrams=data['unique_bigrams'],
            total_bigrams=data['total_bigrams'],
            new_words=list(data.get('new_words', [])),
            vocabulary_size=data.get('vocabulary_size', 0)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'iteration': self.iteration,
            'tokens_before': self.tokens_before,
            'tokens_after': self.tokens_after,
            'unique_bigrams': self.unique_bigrams,
            'total_bigrams': self.total_bigrams,
            'new_words': list(self.new_words),
            'vocabulary_size': self.vocabulary_size
        }

    @property
    def merges(self) -> int:
        """Number of merges performed (each merge removes one token)."""
        return self.tokens_before - self.tokens_after

    def format_compression(self) -> str:
        """Format the token reduction of this iteration as a percentage."""
        if self.tokens_before == 0:
            return "0.00%"
        return f"{self.merges / self.tokens_before * 100:.2f}%"
