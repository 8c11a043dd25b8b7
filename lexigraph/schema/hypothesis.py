from typing import List, Tuple
from pydantic import BaseModel, Field, ConfigDict


class Hypothesis(BaseModel):
    """
    Ordered sequence of ``(word, score)`` pairs along one lattice path.

    Words are stored in source-to-sink order; ``score`` is the combined edge cost
    ``am_score + lm_scale * lm_score`` of the arc that produced the word.
    """
    pairs: List[Tuple[str, float]] = Field(default_factory=list, description="(word, score) pairs in path order")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "pairs": [["a", 2.0], ["c", 2.0]]
            }
        }
    )

    def add_word(self, word: str, score: float) -> None:
        self.pairs.append((word, score))

    @property
    def words(self) -> List[str]:
        return [word for word, _ in self.pairs]

    @property
    def scores(self) -> List[float]:
        return [score for _, score in self.pairs]

    @property
    def total_score(self) -> float:
        return sum(self.scores)

    @property
    def text(self) -> str:
        return " ".join(self.words)

    def __len__(self) -> int:
        return len(self.pairs)

    def __str__(self) -> str:
        return self.text
