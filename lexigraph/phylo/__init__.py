"""
Lexigraph Phylogenetics Package

UPGMA clustering of aligned species into a rooted binary tree, with queries
over the resulting tree and Newick/indented output.

Key modules:
- fasta: FASTA species loading
- tree: PhyloTree and PhyloTreeNode, UPGMA build, static node queries
- validation: Tree shape, label and ultrametric checks
"""

from .fasta import (
    load_species_file,
    parse_species,
    parse_species_name
)

from .tree import (
    PhyloTree,
    PhyloTreeNode,
    node_depth,
    node_height,
    weighted_node_height,
    least_common_ancestor
)

from .validation import (
    validate_tree_labels,
    validate_ultrametric,
    validate_species_alignment
)

__all__ = [
    # FASTA
    "load_species_file",
    "parse_species",
    "parse_species_name",

    # Tree
    "PhyloTree",
    "PhyloTreeNode",
    "node_depth",
    "node_height",
    "weighted_node_height",
    "least_common_ancestor",

    # Validation
    "validate_tree_labels",
    "validate_ultrametric",
    "validate_species_alignment"
]
