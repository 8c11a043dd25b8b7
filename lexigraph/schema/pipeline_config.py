from typing import List, Tuple
from pydantic import BaseModel, Field, ConfigDict


class LatticeConfig(BaseModel):
    """Hyperparameters for the lattice2hyp pipeline."""
    lm_scale: float = Field(1.0, description="Weight applied to lm_score when decoding")
    write_dot: bool = Field(True, description="Write a Graphviz .dot file per lattice")
    write_lattice: bool = Field(True, description="Re-serialize each lattice as <id>.lat")
    hit_words: List[str] = Field(default_factory=list, description="Words whose sorted hit times are reported")
    query_times: List[float] = Field(default_factory=list, description="Times at which overlapping words are reported")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "lm_scale": 8.0,
                "write_dot": True,
                "write_lattice": True,
                "hit_words": ["the"],
                "query_times": [0.5]
            }
        }
    )


class PhyloConfig(BaseModel):
    """Hyperparameters for the fasta2tree pipeline."""
    printing_depth: int = Field(100, ge=0, description="Dots used to indent the deepest node")
    distance_pairs: List[Tuple[str, str]] = Field(default_factory=list, description="Species pairs whose evolutionary distance is reported")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "printing_depth": 100,
                "distance_pairs": [["Human", "Chimp"]]
            }
        }
    )


class WordifierConfig(BaseModel):
    """Hyperparameters for the text2words pipeline."""
    iterations: int = Field(10, ge=0, description="Maximum number of discovery iterations")
    count_threshold: int = Field(5, ge=0, description="Minimum bigram count for a new word")
    probability_threshold: float = Field(0.5, ge=0.0, description="Minimum bigram product score for a new word")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "iterations": 10,
                "count_threshold": 5,
                "probability_threshold": 0.5
            }
        }
    )
