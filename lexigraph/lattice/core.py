"""
Core lattice structure and decoding.

A lattice is a directed acyclic graph that compactly represents a very large
space of speech recognition hypotheses. Nodes carry timestamps, edges carry a
word label plus acoustic and language model scores. This module reads the
simplified lattice format, decodes the best path, counts paths and answers
time/word queries.
"""

import logging
import math
import sys
from collections import deque
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, TextIO, Tuple, Union

from lexigraph.schema.hypothesis import Hypothesis
from lexigraph.schema.lattice import Edge, LatticeStats

# Module-level logger
logger = logging.getLogger(__name__)

SILENCE_LABEL = "-silence-"
HEADER_FIELDS = ("id", "start", "end", "numNodes", "numEdges")


class LatticeParseError(ValueError):
    """Raised when a lattice file does not follow the expected grammar."""


class _TokenReader:
    """Sequential reader over whitespace-separated tokens with parse diagnostics."""

    def __init__(self, text: str, source: str):
        self.tokens = text.split()
        self.pos = 0
        self.source = source

    def has_next(self) -> bool:
        return self.pos < len(self.tokens)

    def next(self, expected: str) -> str:
        if not self.has_next():
            raise LatticeParseError(f"Not able to parse {self.source}: expected {expected} but reached end of input")
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def next_int(self, expected: str) -> int:
        token = self.next(expected)
        try:
            return int(token)
        except ValueError:
            raise LatticeParseError(f"Not able to parse {self.source}: {expected} must be an integer, got '{token}'") from None

    def next_float(self, expected: str) -> float:
        token = self.next(expected)
        try:
            return float(token)
        except ValueError:
            raise LatticeParseError(f"Not able to parse {self.source}: {expected} must be a number, got '{token}'") from None

    def expect(self, keyword: str) -> None:
        token = self.next(f"'{keyword}'")
        if token != keyword:
            raise LatticeParseError(f"Not able to parse {self.source}: expected '{keyword}', got '{token}'")


class Lattice:
    """
    Weighted DAG of recognition hypotheses read from the simplified lattice format.

    The edge set is stored as adjacency lists keyed by source node; iteration
    always walks sources and targets in ascending order so serialization keeps
    the row-major ``(i, j)`` order of the file format.
    """

    def __init__(self, lattice_filename: Union[str, Path, None] = None):
        """
        Load a lattice from file.

        Args:
            lattice_filename: Path of a lattice file. ``None`` creates an empty
                lattice, used by :meth:`from_string`.

        Raises:
            FileNotFoundError: If the file does not exist
            LatticeParseError: If the file is malformed
        """
        self.utterance_id = ""
        self.start_idx = 0
        self.end_idx = 0
        self.num_nodes = 0
        self.num_edges = 0
        self.non_silence_words = 0
        self._node_times: List[float] = []
        self._adjacency: Dict[int, Dict[int, Edge]] = {}

        if lattice_filename is not None:
            path = Path(lattice_filename)
            logger.debug(f"Reading lattice file: {path}")
            with open(path, "r", encoding="utf-8") as f:
                self._parse(f.read(), str(path))

    @classmethod
    def from_string(cls, text: str, source: str = "<string>") -> "Lattice":
        """Parse a lattice from its textual representation."""
        lattice = cls()
        lattice._parse(text, source)
        return lattice

    def _parse(self, text: str, source: str) -> None:
        reader = _TokenReader(text, source)

        reader.expect("id")
        self.utterance_id = reader.next("utterance ID")
        reader.expect("start")
        self.start_idx = reader.next_int("start index")
        reader.expect("end")
        self.end_idx = reader.next_int("end index")
        reader.expect("numNodes")
        self.num_nodes = reader.next_int("node count")
        reader.expect("numEdges")
        self.num_edges = reader.next_int("edge count")

        if self.num_nodes < 0 or self.num_edges < 0:
            raise LatticeParseError(f"Not able to parse {source}: negative node or edge count")
        for name, idx in (("start", self.start_idx), ("end", self.end_idx)):
            if not 0 <= idx < self.num_nodes:
                raise LatticeParseError(f"Not able to parse {source}: {name} index {idx} outside [0, {self.num_nodes})")

        self._node_times = [0.0] * self.num_nodes
        self._adjacency = {}
        self.non_silence_words = 0

        while reader.has_next():
            record = reader.next("record type")
            if record == "node":
                node = self._check_index(reader.next_int("node index"), source)
                self._node_times[node] = reader.next_float("node time")
            elif record == "edge":
                node1 = self._check_index(reader.next_int("edge source"), source)
                node2 = self._check_index(reader.next_int("edge target"), source)
                label = reader.next("edge label")
                am_score = reader.next_int("acoustic score")
                lm_score = reader.next_int("language model score")
                if label != SILENCE_LABEL:
                    self.non_silence_words += 1
                self._adjacency.setdefault(node1, {})[node2] = Edge(label=label, am_score=am_score, lm_score=lm_score)
            else:
                raise LatticeParseError(f"Not able to parse {source}: unknown record type '{record}'")

        logger.debug(
            f"Parsed lattice {self.utterance_id}: {self.num_nodes} nodes, "
            f"{self.edge_count()} edges stored, {self.non_silence_words} non-silence words"
        )

    def _check_index(self, idx: int, source: str) -> int:
        if not 0 <= idx < self.num_nodes:
            raise LatticeParseError(f"Not able to parse {source}: node index {idx} outside [0, {self.num_nodes})")
        return idx

    # Accessors

    def get_utterance_id(self) -> str:
        return self.utterance_id

    def get_num_nodes(self) -> int:
        return self.num_nodes

    def get_num_edges(self) -> int:
        return self.num_edges

    @property
    def node_times(self) -> List[float]:
        return list(self._node_times)

    def get_edge(self, i: int, j: int) -> Optional[Edge]:
        return self._adjacency.get(i, {}).get(j)

    def successors(self, i: int) -> List[int]:
        return sorted(self._adjacency.get(i, {}))

    def edges(self) -> Iterator[Tuple[int, int, Edge]]:
        """Yield ``(i, j, edge)`` in row-major order."""
        for i in sorted(self._adjacency):
            row = self._adjacency[i]
            for j in sorted(row):
                yield i, j, row[j]

    def edge_count(self) -> int:
        """Number of distinct edges actually stored."""
        return sum(len(row) for row in self._adjacency.values())

    # Graph algorithms

    def topological_sort(self) -> List[int]:
        """
        Kahn topological sort of all nodes.

        Zero in-degree nodes are seeded in ascending index order and successors
        are released in ascending index order, so ties follow insertion order.

        Returns:
            List of ``num_nodes`` node indices where every edge ``(u, v)`` has
            ``u`` before ``v``

        Raises:
            ValueError: If the lattice contains a cycle
        """
        in_degree = [0] * self.num_nodes
        for _, j, _ in self.edges():
            in_degree[j] += 1

        queue = deque(i for i in range(self.num_nodes) if in_degree[i] == 0)
        order: List[int] = []
        while queue:
            n = queue.popleft()
            order.append(n)
            for i in self.successors(n):
                in_degree[i] -= 1
                if in_degree[i] == 0:
                    queue.append(i)

        if len(order) != self.num_nodes:
            raise ValueError(
                f"Lattice {self.utterance_id} contains a cycle: sorted {len(order)} of {self.num_nodes} nodes"
            )
        return order

    def decode(self, lm_scale: float) -> Hypothesis:
        """
        Find the lowest-cost path from the start node to the end node.

        The cost of an edge is ``am_score + lm_scale * lm_score``. Nodes are
        relaxed in topological order; predecessors of a node are visited in
        topological order and only a strictly lower cost replaces the current
        best, so the first-seen predecessor wins ties.

        Args:
            lm_scale: Weight of the language model score

        Returns:
            Hypothesis with one ``(word, score)`` pair per edge on the best path

        Raises:
            ValueError: If the end node cannot be reached from the start node
        """
        hypothesis = Hypothesis()
        if self.start_idx == self.end_idx:
            return hypothesis

        order = self.topological_sort()
        position = {node: k for k, node in enumerate(order)}
        incoming: Dict[int, List[int]] = {}
        for i, j, _ in self.edges():
            incoming.setdefault(j, []).append(i)

        cost = [math.inf] * self.num_nodes
        parent: List[Optional[int]] = [None] * self.num_nodes
        cost[self.start_idx] = 0.0

        for n in order:
            for i in sorted(incoming.get(n, []), key=position.__getitem__):
                candidate = cost[i] + self._adjacency[i][n].cost(lm_scale)
                if candidate < cost[n]:
                    cost[n] = candidate
                    parent[n] = i

        if math.isinf(cost[self.end_idx]):
            raise ValueError(f"Lattice {self.utterance_id}: end node {self.end_idx} is unreachable from start node {self.start_idx}")

        path = [self.end_idx]
        while path[-1] != self.start_idx:
            path.append(parent[path[-1]])
        path.reverse()

        for i, j in zip(path, path[1:]):
            edge = self._adjacency[i][j]
            hypothesis.add_word(edge.label, edge.cost(lm_scale))

        logger.debug(f"Decoded {self.utterance_id} (lm_scale={lm_scale}): '{hypothesis.text}' cost={cost[self.end_idx]}")
        return hypothesis

    def count_all_paths(self) -> int:
        """Return the number of distinct paths from the start node to the end node."""
        paths = [0] * self.num_nodes
        paths[self.start_idx] = 1
        for n in self.topological_sort():
            if paths[n] == 0:
                continue
            for i in self.successors(n):
                paths[i] += paths[n]
        return paths[self.end_idx]

    def get_lattice_density(self) -> float:
        """
        Non-silence words divided by the end node's timestamp.

        Multiwords (e.g. ``to_the``) count as a single word. The denominator is
        the absolute end time, not the start-to-end duration.
        """
        end_time = self._node_times[self.end_idx]
        if end_time == 0:
            return math.nan if self.non_silence_words == 0 else math.inf
        return self.non_silence_words / end_time

    # Queries

    def unique_words_at_time(self, time: float) -> Set[str]:
        """Return all distinct labels on edges spanning ``time``."""
        words = set()
        for i, j, edge in self.edges():
            if self._node_times[i] <= time <= self._node_times[j]:
                words.add(edge.label)
        return words

    def sorted_hits(self, word: str) -> List[str]:
        """
        Midpoints of every edge labelled ``word``, formatted to two decimals.

        The result is sorted as strings, so ``"10.00"`` sorts before ``"9.50"``.
        """
        times = []
        for i, j, edge in self.edges():
            if edge.label == word:
                times.append(f"{(self._node_times[i] + self._node_times[j]) / 2:.2f}")
        return sorted(times)

    def print_sorted_hits(self, word: str, file: Optional[TextIO] = None) -> None:
        """Print the sorted hit times of ``word`` on one line; nothing if it never appears."""
        hits = self.sorted_hits(word)
        if hits:
            print(" ".join(hits), file=file if file is not None else sys.stdout)

    # Serialization

    def to_string(self) -> str:
        """Reconstruct the lattice file from the stored fields."""
        lines = [
            f"id {self.utterance_id}",
            f"start {self.start_idx}",
            f"end {self.end_idx}",
            f"numNodes {self.num_nodes}",
            f"numEdges {self.num_edges}",
        ]
        lines.extend(f"node {i} {t:.2f}" for i, t in enumerate(self._node_times))
        lines.extend(
            f"edge {i} {j} {edge.label} {edge.am_score} {edge.lm_score}"
            for i, j, edge in self.edges()
        )
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_string()

    def save_as_file(self, lattice_output_filename: Union[str, Path]) -> None:
        """Write the lattice in the simplified lattice format."""
        path = Path(lattice_output_filename)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_string() + "\n")
        logger.debug(f"Saved lattice {self.utterance_id} to {path}")

    def to_dot(self) -> str:
        """Render the lattice as a Graphviz digraph."""
        lines = ["digraph g {", '   rankdir="LR"']
        lines.extend(f'   {i} -> {j} [label = "{edge.label}"]' for i, j, edge in self.edges())
        lines.append("}")
        return "\n".join(lines) + "\n"

    def write_as_dot(self, dot_filename: Union[str, Path]) -> None:
        """Write the lattice in dot format."""
        path = Path(dot_filename)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_dot())
        logger.debug(f"Wrote dot graph for {self.utterance_id} to {path}")

    def get_stats(self, lm_scale: float) -> LatticeStats:
        """Decode and summarise the lattice."""
        hypothesis = self.decode(lm_scale)
        return LatticeStats(
            utterance_id=self.utterance_id,
            num_nodes=self.num_nodes,
            num_edges=self.num_edges,
            non_silence_words=self.non_silence_words,
            num_paths=self.count_all_paths(),
            density=self.get_lattice_density(),
            lm_scale=lm_scale,
            best_hypothesis=hypothesis.text,
            best_score=hypothesis.total_score
        )
