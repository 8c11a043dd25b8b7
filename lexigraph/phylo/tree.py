"""
Phylogenetic tree inference.

Builds a strictly binary, rooted tree over a set of species with UPGMA
clustering: the closest pair of clusters is merged repeatedly, the new
cluster's distance to every other cluster is the leaf-count weighted average of
its parts, and the merged node sits at half the merge distance.

Internal nodes are labelled ``left.label + "+" + right.label``. Subtree
membership is answered from explicit per-node label sets rather than substring
tests on these composite labels.
"""

import logging
import math
import weakref
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from lexigraph.schema.species import Species
from lexigraph.schema.tree_stats import TreeStats
from .fasta import load_species_file

logger = logging.getLogger(__name__)


class PhyloTreeNode:
    """
    Node of a phylogenetic tree.

    Children are owned by their parent; the parent link is a weak reference.
    ``distance_to_child`` is the edge weight from this node down to either child
    (half the distance at which the children were merged, 0 for leaves).
    """

    def __init__(
        self,
        label: Optional[str] = None,
        species: Optional[Species] = None,
        left_child: Optional["PhyloTreeNode"] = None,
        right_child: Optional["PhyloTreeNode"] = None,
        distance_to_child: float = 0.0
    ):
        if label is None:
            if species is None:
                raise ValueError("A tree node needs a label or a species")
            label = species.name
        if (left_child is None) != (right_child is None):
            raise ValueError(f"Node '{label}' must have both children or neither")

        self.label = label
        self.species = species
        self.left_child = left_child
        self.right_child = right_child
        self.distance_to_child = distance_to_child
        self._parent: Optional[weakref.ReferenceType] = None

        labels = {label}
        self.num_leafs = 1
        if left_child is not None and right_child is not None:
            left_child.parent = self
            right_child.parent = self
            labels |= left_child.subtree_labels | right_child.subtree_labels
            self.num_leafs = left_child.num_leafs + right_child.num_leafs
        self.subtree_labels: FrozenSet[str] = frozenset(labels)

    @property
    def parent(self) -> Optional["PhyloTreeNode"]:
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, node: Optional["PhyloTreeNode"]) -> None:
        self._parent = weakref.ref(node) if node is not None else None

    @property
    def is_leaf(self) -> bool:
        return self.left_child is None and self.right_child is None

    @property
    def branch_length(self) -> float:
        """Length of the edge above this node (0 at the root)."""
        parent = self.parent
        if parent is None:
            return 0.0
        return parent.distance_to_child - self.distance_to_child

    def contains(self, label: str) -> bool:
        """True if ``label`` names this node or one of its descendants."""
        return label in self.subtree_labels

    def __str__(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return f"PhyloTreeNode(label={self.label!r}, distance_to_child={self.distance_to_child})"


# Static queries

def node_depth(node: Optional[PhyloTreeNode]) -> int:
    """Number of parent links from ``node`` to the root; -1 for None."""
    if node is None:
        return -1
    depth = 0
    parent = node.parent
    while parent is not None:
        depth += 1
        parent = parent.parent
    return depth


def node_height(node: Optional[PhyloTreeNode]) -> int:
    """Height of the subtree rooted at ``node`` (leaf 0, None -1)."""
    if node is None:
        return -1
    return 1 + max(node_height(node.left_child), node_height(node.right_child))


def weighted_node_height(node: Optional[PhyloTreeNode]) -> float:
    """
    Weighted height of the subtree rooted at ``node``.

    This is the largest sum of ``distance_to_child`` over the paths from
    ``node`` to a leaf, which need not lie on the longest unweighted path.
    Returns -inf for None.
    """
    if node is None:
        return -math.inf
    return _weighted_height(node)


def _weighted_height(node: Optional[PhyloTreeNode]) -> float:
    if node is None:
        return 0.0
    return node.distance_to_child + max(_weighted_height(node.left_child), _weighted_height(node.right_child))


def least_common_ancestor(
    node1: Optional[PhyloTreeNode],
    node2: Optional[PhyloTreeNode]
) -> Optional[PhyloTreeNode]:
    """Deepest node whose subtree contains both nodes; None if either is None."""
    if node1 is None or node2 is None:
        return None
    ancestor = node1
    while ancestor is not None and not ancestor.contains(node2.label):
        ancestor = ancestor.parent
    return ancestor


def _pair_key(label1: str, label2: str) -> Tuple[str, str]:
    return (label1, label2) if label1 <= label2 else (label2, label1)


class PhyloTree:
    """
    Rooted binary tree of inferred species relationships.

    Args:
        species_file: FASTA file with the species to cluster
        printing_depth: Number of dots used to indent the deepest node when printing

    Raises:
        ValueError: If ``printing_depth`` is negative, species names repeat or a
            merge would reuse an existing label
    """

    def __init__(self, species_file: Union[str, Path], printing_depth: int):
        self._initialize(printing_depth)
        self._build_tree(load_species_file(species_file))

    @classmethod
    def from_species(cls, species: List[Species], printing_depth: int) -> "PhyloTree":
        """Build a tree from already loaded species."""
        tree = cls.__new__(cls)
        tree._initialize(printing_depth)
        tree._build_tree(species)
        return tree

    def _initialize(self, printing_depth: int) -> None:
        if printing_depth < 0:
            raise ValueError(f"printing_depth out of range: {printing_depth} (must be non-negative)")
        self.printing_depth = printing_depth
        self.overall_root: Optional[PhyloTreeNode] = None

    def _build_tree(self, species: List[Species]) -> None:
        names = [s.name for s in species]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Species names must be unique, duplicated: {duplicates}")

        working: List[PhyloTreeNode] = [PhyloTreeNode(species=s) for s in species]
        used_labels = set(names)
        distances: Dict[Tuple[str, str], float] = {}
        for i in range(len(species) - 1):
            for j in range(i + 1, len(species)):
                distances[_pair_key(species[i].name, species[j].name)] = Species.distance(species[i], species[j])

        logger.info(f"Clustering {len(working)} species ({len(distances)} pairwise distances)")

        while len(working) > 1:
            min_value = min(distances.values())
            lesser, greater = min(
                (key for key, value in distances.items() if value == min_value),
                key=lambda key: f"{key[0]}|{key[1]}"
            )
            by_label = {node.label: node for node in working}
            less, great = by_label[lesser], by_label[greater]
            combined_label = f"{lesser}+{greater}"
            if combined_label in used_labels:
                raise ValueError(
                    f"Merging '{lesser}' and '{greater}' would create label '{combined_label}', which is already in use"
                )
            used_labels.add(combined_label)
            n_less, n_great = less.num_leafs, great.num_leafs

            for other in working:
                if other is less or other is great:
                    continue
                d_less = distances.pop(_pair_key(lesser, other.label))
                d_great = distances.pop(_pair_key(greater, other.label))
                distances[_pair_key(combined_label, other.label)] = (n_less * d_less + n_great * d_great) / (n_less + n_great)

            merge_distance = distances.pop(_pair_key(lesser, greater))
            combined = PhyloTreeNode(
                label=combined_label,
                left_child=less,
                right_child=great,
                distance_to_child=merge_distance / 2.0
            )
            logger.debug(f"Merged '{lesser}' and '{greater}' at distance {merge_distance:.5f}")

            working = [node for node in working if node is not less and node is not great]
            working.append(combined)

        if working:
            self.overall_root = working[0]

    # Accessors

    def get_overall_root(self) -> Optional[PhyloTreeNode]:
        return self.overall_root

    def get_height(self) -> int:
        return node_height(self.overall_root)

    def get_weighted_height(self) -> float:
        return weighted_node_height(self.overall_root)

    def count_all_species(self) -> int:
        if self.overall_root is None:
            return 0
        return self.overall_root.num_leafs

    def get_all_species(self) -> List[Species]:
        """All species in left-first depth-first order."""
        found: List[Species] = []

        def collect(node: Optional[PhyloTreeNode]) -> None:
            if node is None:
                return
            if node.is_leaf:
                found.append(node.species)
                return
            collect(node.left_child)
            collect(node.right_child)

        collect(self.overall_root)
        return found

    def find_tree_node_by_label(self, label: str) -> Optional[PhyloTreeNode]:
        """Return the node with ``label`` or None if no such node exists."""
        node = self.overall_root
        while node is not None:
            if node.label == label:
                return node
            if node.left_child is not None and node.left_child.contains(label):
                node = node.left_child
            elif node.right_child is not None and node.right_child.contains(label):
                node = node.right_child
            else:
                return None
        return None

    def find_least_common_ancestor(self, label1: str, label2: str) -> Optional[PhyloTreeNode]:
        """Least common ancestor of two labelled nodes; None if either is missing."""
        return least_common_ancestor(self.find_tree_node_by_label(label1), self.find_tree_node_by_label(label2))

    def find_evolutionary_distance(self, label1: str, label2: str) -> float:
        """
        Sum of branch lengths on the path between two labelled nodes.

        Returns:
            Path length through the least common ancestor, or inf if either
            label is not in the tree
        """
        node1 = self.find_tree_node_by_label(label1)
        node2 = self.find_tree_node_by_label(label2)
        if node1 is None or node2 is None:
            return math.inf
        ancestor = least_common_ancestor(node1, node2)
        # branch lengths telescope to height differences
        return (ancestor.distance_to_child - node1.distance_to_child) + (ancestor.distance_to_child - node2.distance_to_child)

    # Output

    def to_tree_string(self) -> str:
        """Newick representation with the right child written first."""
        if self.overall_root is None:
            return ""
        return self._newick(self.overall_root)

    def _newick(self, node: PhyloTreeNode) -> str:
        if node.is_leaf:
            body = node.label
        else:
            body = f"({self._newick(node.right_child)},{self._newick(node.left_child)})"
        if node.parent is None:
            return f"{body}:0.0"
        return f"{body}:{node.branch_length:.5f}"

    def to_string(self) -> str:
        """
        Indented reverse in-order rendering (right subtree, node, left subtree).

        Each line is prefixed with ``ceil(printing_depth * weighted_depth /
        max_weighted_depth)`` dots, so reading top to bottom shows the tree
        lying on its side with the root on the left.
        """
        if self.overall_root is None:
            return ""
        max_depth = weighted_node_height(self.overall_root)
        lines: List[str] = []

        def visit(node: Optional[PhyloTreeNode], weighted_depth: float) -> None:
            if node is None:
                return
            visit(node.right_child, weighted_depth + node.distance_to_child)
            k = math.ceil(self.printing_depth * (weighted_depth / max_depth)) if max_depth > 0 else 0
            lines.append("." * k + str(node))
            visit(node.left_child, weighted_depth + node.distance_to_child)

        visit(self.overall_root, 0.0)
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_string()

    def get_stats(self) -> TreeStats:
        root = self.overall_root
        return TreeStats(
            species_count=self.count_all_species(),
            height=self.get_height(),
            weighted_height=self.get_weighted_height(),
            root_label=root.label if root is not None else None,
            newick=self.to_tree_string()
        )
