"""
Validation functions for phylogenetic trees.

These checks mirror the invariants the UPGMA builder guarantees: composite
labels, strict binary shape, ultrametric heights and aligned input species.
"""

import math
from typing import Dict, List, Union

from lexigraph.schema.species import Species
from .tree import PhyloTree, PhyloTreeNode


def _iter_nodes(node: PhyloTreeNode):
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if not current.is_leaf:
            stack.append(current.right_child)
            stack.append(current.left_child)


def validate_tree_labels(tree: PhyloTree) -> Dict[str, int]:
    """
    Validate labels and shape of a tree.

    Every internal node must have both children and be labelled
    ``left.label + "+" + right.label``; labels must be unique.

    Returns:
        Dictionary with node counts

    Raises:
        ValueError: If a label or shape invariant is violated
    """
    if tree.overall_root is None:
        return {"total_nodes": 0, "leaves": 0, "internal_nodes": 0}

    seen = set()
    leaves = internal = 0
    for node in _iter_nodes(tree.overall_root):
        if node.label in seen:
            raise ValueError(f"Duplicate label in tree: '{node.label}'")
        seen.add(node.label)

        if node.left_child is None and node.right_child is None:
            leaves += 1
            continue
        if node.left_child is None or node.right_child is None:
            raise ValueError(f"Node '{node.label}' has exactly one child")
        internal += 1
        expected = f"{node.left_child.label}+{node.right_child.label}"
        if node.label != expected:
            raise ValueError(f"Node label '{node.label}' does not match children: expected '{expected}'")
        for child in (node.left_child, node.right_child):
            if child.parent is not node:
                raise ValueError(f"Child '{child.label}' is not linked back to parent '{node.label}'")

    return {"total_nodes": leaves + internal, "leaves": leaves, "internal_nodes": internal}


def validate_ultrametric(tree: PhyloTree, tolerance: float = 1e-9) -> None:
    """
    Validate that every leaf below a node lies at the node's height.

    Leaves sit at height 0 and branch lengths are height differences, so the
    tree is ultrametric exactly when no node sits below one of its children.

    Raises:
        ValueError: If a leaf has a height or a branch length is negative
    """
    if tree.overall_root is None:
        return
    for node in _iter_nodes(tree.overall_root):
        if node.is_leaf and not math.isclose(node.distance_to_child, 0.0, abs_tol=tolerance):
            raise ValueError(f"Leaf '{node.label}' has non-zero distance_to_child {node.distance_to_child}")
        if node.branch_length < -tolerance:
            raise ValueError(f"Negative branch length above '{node.label}': {node.branch_length}")


def validate_species_alignment(species: List[Species]) -> Dict[str, Union[int, float]]:
    """
    Validate that species can be clustered together.

    Returns:
        Dictionary with species statistics

    Raises:
        ValueError: If names repeat or sequence lengths differ
    """
    names = [s.name for s in species]
    if len(set(names)) != len(names):
        duplicates = sorted({n for n in names if names.count(n) > 1})
        raise ValueError(f"Duplicate species names: {duplicates}")

    lengths = {len(s.sequence) for s in species}
    if len(lengths) > 1:
        raise ValueError(f"Species sequences are not aligned, lengths found: {sorted(lengths)}")

    return {
        "species": len(species),
        "sequence_length": lengths.pop() if lengths else 0,
        "pairs": len(species) * (len(species) - 1) // 2
    }
