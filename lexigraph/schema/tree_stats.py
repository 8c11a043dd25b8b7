from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class TreeStats(BaseModel):
    """
    Summary of an inferred phylogenetic tree.

    Heights follow the tree's own conventions: ``height`` counts edges on the
    longest root-to-leaf path and ``weighted_height`` sums ``distance_to_child``
    along the heaviest root-to-leaf path.
    """
    species_count: int = Field(..., ge=0, description="Number of leaves in the tree")
    height: int = Field(..., ge=-1, description="Unweighted height (-1 for an empty tree)")
    weighted_height: float = Field(..., description="Weighted height (-inf for an empty tree)")
    root_label: Optional[str] = Field(None, description="Label of the overall root")
    newick: str = Field("", description="Newick representation, right child first")

    model_config = ConfigDict(
        ser_json_inf_nan="constants",
        json_schema_extra={
            "example": {
                "species_count": 3,
                "height": 2,
                "weighted_height": 0.4,
                "root_label": "A+B+C",
                "newick": "(C:0.30000,(B:0.10000,A:0.10000):0.20000):0.0"
            }
        }
    )
