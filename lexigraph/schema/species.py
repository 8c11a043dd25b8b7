from typing import List
import numpy as np
from pydantic import BaseModel, Field, ConfigDict


class Species(BaseModel):
    """
    A named species with its aligned sequence.

    The sequence is stored as single-character tokens so that pairwise distances
    compare aligned positions one token at a time.
    """
    name: str = Field(..., description="Species name taken from the FASTA header")
    sequence: List[str] = Field(default_factory=list, description="Aligned sequence, one character per token")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "Homo_sapiens",
                "sequence": ["M", "A", "L", "W"]
            }
        }
    )

    @classmethod
    def from_string(cls, name: str, sequence: str) -> "Species":
        return cls(name=name, sequence=list(sequence))

    def __len__(self) -> int:
        return len(self.sequence)

    @staticmethod
    def distance(a: "Species", b: "Species") -> float:
        """
        Hamming fraction between two aligned species.

        Args:
            a: First species
            b: Second species

        Returns:
            Number of positions whose tokens differ divided by the sequence length

        Raises:
            ValueError: If the sequences have different lengths
        """
        if len(a.sequence) != len(b.sequence):
            raise ValueError(
                f"Cannot compare '{a.name}' ({len(a.sequence)} tokens) with "
                f"'{b.name}' ({len(b.sequence)} tokens): sequences must be aligned"
            )
        if not a.sequence:
            return 0.0
        diffs = np.count_nonzero(np.array(a.sequence) != np.array(b.sequence))
        return int(diffs) / len(a.sequence)
