"""
Validation functions for recognition lattices.

This module checks the structural invariants a lattice must satisfy before it
can be decoded and verifies that decoder output is consistent with the graph.
"""

from typing import Dict, List, Union

from lexigraph.schema.hypothesis import Hypothesis
from .core import Lattice


def validate_topological_order(lattice: Lattice, order: List[int]) -> None:
    """
    Validate that ``order`` is a topological ordering of the lattice.

    Args:
        lattice: Lattice the ordering was computed for
        order: Candidate node ordering

    Raises:
        ValueError: If nodes are missing, duplicated or an edge points backwards
    """
    if len(order) != lattice.num_nodes:
        raise ValueError(f"Ordering has {len(order)} nodes, lattice has {lattice.num_nodes}")
    if len(set(order)) != len(order):
        raise ValueError("Ordering contains duplicate nodes")

    position = {node: k for k, node in enumerate(order)}
    if set(position) != set(range(lattice.num_nodes)):
        raise ValueError("Ordering is not a permutation of the lattice nodes")

    for i, j, _ in lattice.edges():
        if position[i] >= position[j]:
            raise ValueError(f"Edge ({i}, {j}) violates the ordering: {i} at {position[i]}, {j} at {position[j]}")


def validate_lattice_structure(lattice: Lattice) -> Dict[str, Union[int, float]]:
    """
    Validate the structural invariants of a lattice.

    Checks that the graph is acyclic, the start node has no incoming edges, the
    end node has no outgoing edges and node times never decrease along an edge.

    Args:
        lattice: Lattice to validate

    Returns:
        Dictionary with structure statistics

    Raises:
        ValueError: If any invariant is violated
    """
    order = lattice.topological_sort()
    validate_topological_order(lattice, order)

    times = lattice.node_times
    for i, j, edge in lattice.edges():
        if j == lattice.start_idx:
            raise ValueError(f"Start node {lattice.start_idx} has incoming edge from {i} ('{edge.label}')")
        if i == lattice.end_idx:
            raise ValueError(f"End node {lattice.end_idx} has outgoing edge to {j} ('{edge.label}')")
        if times[j] < times[i]:
            raise ValueError(f"Edge ({i}, {j}) '{edge.label}' goes back in time: {times[i]} > {times[j]}")

    negative = [i for i, t in enumerate(times) if t < 0]
    if negative:
        raise ValueError(f"Nodes with negative time: {negative}")

    stored = lattice.edge_count()
    return {
        "num_nodes": lattice.num_nodes,
        "declared_edges": lattice.num_edges,
        "stored_edges": stored,
        "non_silence_words": lattice.non_silence_words,
        "duration": times[lattice.end_idx] - times[lattice.start_idx]
    }


def validate_hypothesis(lattice: Lattice, hypothesis: Hypothesis, lm_scale: float) -> None:
    """
    Validate that a hypothesis follows a real start-to-end path.

    Args:
        lattice: Lattice the hypothesis was decoded from
        hypothesis: Decoder output
        lm_scale: Language model scale used for decoding

    Raises:
        ValueError: If no start-to-end path produces the hypothesis words and scores
    """
    frontier = {lattice.start_idx}
    for k, (word, score) in enumerate(hypothesis.pairs):
        next_frontier = set()
        for i in frontier:
            for j in lattice.successors(i):
                edge = lattice.get_edge(i, j)
                if edge.label == word and abs(edge.cost(lm_scale) - score) < 1e-9:
                    next_frontier.add(j)
        if not next_frontier:
            raise ValueError(f"Hypothesis word {k} ('{word}', {score}) does not extend any path")
        frontier = next_frontier

    if lattice.end_idx not in frontier:
        raise ValueError(f"Hypothesis '{hypothesis.text}' does not end at node {lattice.end_idx}")
