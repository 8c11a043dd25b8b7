from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class Edge(BaseModel):
    """
    A single arc of a recognition lattice.

    Each edge carries the word (or multiword such as ``to_the``) hypothesised
    between its two nodes together with the integer acoustic model and language
    model scores. Edges are immutable once read from the lattice file.
    """
    label: str = Field(..., description="Word or multiword on the arc (e.g., 'hello', '-silence-')")
    am_score: int = Field(..., description="Acoustic model score (lower is better)")
    lm_score: int = Field(..., description="Language model score (lower is better)")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "label": "hello",
                "am_score": 1520,
                "lm_score": 36
            }
        }
    )

    def cost(self, lm_scale: float) -> float:
        """Combined edge cost ``am_score + lm_scale * lm_score``."""
        return self.am_score + lm_scale * self.lm_score


class LatticeStats(BaseModel):
    """Summary of a decoded lattice, written next to the lattice outputs."""
    utterance_id: str = Field(..., description="Unique ID of the utterance")
    num_nodes: int = Field(..., ge=0, description="Number of nodes declared by the header")
    num_edges: int = Field(..., ge=0, description="Number of edges declared by the header")
    non_silence_words: int = Field(..., ge=0, description="Edges whose label is not -silence-")
    num_paths: int = Field(..., ge=0, description="Distinct start-to-end paths (unbounded integer)")
    density: float = Field(..., description="Non-silence words divided by the end node's time")
    lm_scale: float = Field(..., description="Language model scale used for decoding")
    best_hypothesis: Optional[str] = Field(None, description="Words along the best path, space separated")
    best_score: Optional[float] = Field(None, description="Total cost of the best path")

    model_config = ConfigDict(
        ser_json_inf_nan="constants",
        json_schema_extra={
            "example": {
                "utterance_id": "sw2001-A-0001",
                "num_nodes": 4,
                "num_edges": 4,
                "non_silence_words": 4,
                "num_paths": 2,
                "density": 4.0,
                "lm_scale": 1.0,
                "best_hypothesis": "a c",
                "best_score": 4.0
            }
        }
    )
