"""
Test suite for lexigraph.lattice.core.

Covers:
- Parsing of the simplified lattice format and its error cases
- Topological sort, best-path decoding and path counting
- Density, time queries and word hits
- Text and dot serialization
"""

import io
import math
import random

import pytest

from lexigraph.lattice import Lattice, LatticeParseError, SILENCE_LABEL, validate_hypothesis
from lexigraph.schema.lattice import Edge


def make_lattice(edges, num_nodes, start=0, end=None, times=None, uid="test"):
    """Build lattice text from ``(i, j, label, am, lm)`` tuples."""
    end = num_nodes - 1 if end is None else end
    lines = [f"id {uid}", f"start {start}", f"end {end}", f"numNodes {num_nodes}", f"numEdges {len(edges)}"]
    for i, t in enumerate(times or []):
        lines.append(f"node {i} {t}")
    for i, j, label, am, lm in edges:
        lines.append(f"edge {i} {j} {label} {am} {lm}")
    return Lattice.from_string("\n".join(lines) + "\n")


def chained_diamonds(k: int) -> Lattice:
    """k diamonds in series; 2**k start-to-end paths."""
    edges = []
    for s in range(k):
        j, m1, m2, nxt = 3 * s, 3 * s + 1, 3 * s + 2, 3 * (s + 1)
        edges += [(j, m1, "x", 1, 1), (j, m2, "y", 1, 1), (m1, nxt, "z", 1, 1), (m2, nxt, "w", 1, 1)]
    return make_lattice(edges, 3 * k + 1)


class TestLatticeParsing:
    """Test reading lattices from text and files."""

    def test_header_fields(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        assert lattice.get_utterance_id() == "diamond"
        assert lattice.start_idx == 0
        assert lattice.end_idx == 3
        assert lattice.get_num_nodes() == 4
        assert lattice.get_num_edges() == 4
        assert lattice.node_times == [0.0, 0.5, 0.5, 1.0]

    def test_load_from_file(self, diamond_file):
        lattice = Lattice(diamond_file)
        assert lattice.get_utterance_id() == "diamond"
        assert lattice.get_edge(0, 1) == Edge(label="a", am_score=1, lm_score=1)
        assert lattice.get_edge(1, 0) is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Lattice(tmp_path / "missing.lat")

    def test_node_times_default_to_zero(self):
        lattice = make_lattice([(0, 2, "a", 1, 1)], 3, times=[0.0, 0.0, 1.5])
        assert lattice.node_times == [0.0, 0.0, 1.5]
        lattice = make_lattice([(0, 1, "a", 1, 1)], 2)
        assert lattice.node_times == [0.0, 0.0]

    def test_node_times_copy(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        times = lattice.node_times
        times[0] = 99.0
        assert lattice.node_times[0] == 0.0

    def test_silence_not_counted(self):
        lattice = make_lattice(
            [(0, 1, SILENCE_LABEL, 1, 1), (1, 2, "to_the", 1, 1), (2, 3, "end", 1, 1)], 4
        )
        assert lattice.non_silence_words == 2

    def test_duplicate_edge_replaces_earlier(self):
        lattice = make_lattice([(0, 1, "a", 1, 1), (0, 1, "z", 5, 5)], 2)
        assert lattice.get_edge(0, 1).label == "z"
        assert lattice.edge_count() == 1
        assert lattice.non_silence_words == 2

    def test_bad_header_keyword(self):
        with pytest.raises(LatticeParseError, match="expected 'start'"):
            Lattice.from_string("id x begin 0 end 1 numNodes 2 numEdges 0")

    def test_truncated_header(self):
        with pytest.raises(LatticeParseError, match="end of input"):
            Lattice.from_string("id x start 0 end 1")

    def test_unknown_record(self):
        with pytest.raises(LatticeParseError, match="unknown record type 'arc'"):
            Lattice.from_string("id x start 0 end 1 numNodes 2 numEdges 1 arc 0 1 a 1 1")

    def test_non_integer_score(self):
        with pytest.raises(LatticeParseError, match="must be an integer"):
            Lattice.from_string("id x start 0 end 1 numNodes 2 numEdges 1 edge 0 1 a 1.5 1")

    def test_edge_index_out_of_range(self):
        with pytest.raises(LatticeParseError, match="outside"):
            Lattice.from_string("id x start 0 end 1 numNodes 2 numEdges 1 edge 0 7 a 1 1")

    def test_end_index_out_of_range(self):
        with pytest.raises(LatticeParseError, match="end index 5"):
            Lattice.from_string("id x start 0 end 5 numNodes 2 numEdges 0")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            Lattice.from_string("garbage")


class TestLatticeAlgorithms:
    """Test topological sort, decoding and path counting."""

    def test_topological_sort(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        assert lattice.topological_sort() == [0, 1, 2, 3]

    def test_topological_sort_respects_edges(self):
        lattice = make_lattice([(0, 3, "a", 1, 1), (3, 1, "b", 1, 1), (1, 2, "c", 1, 1)], 4, end=2)
        order = lattice.topological_sort()
        assert order.index(0) < order.index(3) < order.index(1) < order.index(2)

    def test_topological_sort_cycle(self):
        lattice = make_lattice(
            [(0, 1, "a", 1, 1), (1, 2, "b", 1, 1), (2, 1, "c", 1, 1), (2, 3, "d", 1, 1)], 4
        )
        with pytest.raises(ValueError, match="cycle"):
            lattice.topological_sort()

    def test_decode_diamond(self, diamond_text):
        hypothesis = Lattice.from_string(diamond_text).decode(1.0)
        assert hypothesis.pairs == [("a", 2.0), ("c", 2.0)]
        assert hypothesis.total_score == 4.0
        assert hypothesis.text == "a c"
        assert len(hypothesis) == 2

    def test_decode_lm_scale_changes_path(self):
        lattice = make_lattice([(0, 1, "acoustic", 3, 0), (0, 2, "language", 1, 10), (1, 3, "x", 0, 0), (2, 3, "x", 0, 0)], 4)
        assert lattice.decode(0.0).words == ["language", "x"]
        assert lattice.decode(1.0).words == ["acoustic", "x"]
        assert lattice.decode(1.0).scores == [3.0, 0.0]

    def test_decode_tie_keeps_first_predecessor(self):
        lattice = make_lattice([(0, 1, "a", 1, 1), (0, 2, "b", 1, 1), (1, 3, "c", 1, 1), (2, 3, "d", 1, 1)], 4)
        assert lattice.decode(1.0).words == ["a", "c"]

    def test_decode_start_equals_end(self):
        lattice = make_lattice([], 1, start=0, end=0)
        hypothesis = lattice.decode(1.0)
        assert len(hypothesis) == 0
        assert hypothesis.total_score == 0

    def test_decode_unreachable_end(self):
        lattice = make_lattice([(0, 1, "a", 1, 1)], 3, end=2)
        with pytest.raises(ValueError, match="unreachable"):
            lattice.decode(1.0)

    def test_decode_matches_exhaustive_search(self):
        rng = random.Random(11)
        for trial in range(25):
            num_nodes = rng.randint(2, 7)
            edges = [(i, i + 1, f"w{i}_{i + 1}", rng.randint(0, 9), rng.randint(0, 9)) for i in range(num_nodes - 1)]
            for i in range(num_nodes):
                for j in range(i + 2, num_nodes):
                    if rng.random() < 0.4:
                        edges.append((i, j, f"w{i}_{j}", rng.randint(0, 9), rng.randint(0, 9)))
            lattice = make_lattice(edges, num_nodes, uid=f"random{trial}")

            paths = []
            stack = [(0, [0])]
            while stack:
                node, path = stack.pop()
                if node == num_nodes - 1:
                    paths.append(path)
                    continue
                for succ in lattice.successors(node):
                    stack.append((succ, path + [succ]))
            assert lattice.count_all_paths() == len(paths)

            for lm_scale in (0.0, 0.5, 2.0):
                best = min(
                    sum(lattice.get_edge(a, b).cost(lm_scale) for a, b in zip(path, path[1:]))
                    for path in paths
                )
                hypothesis = lattice.decode(lm_scale)
                assert hypothesis.total_score == pytest.approx(best)
                validate_hypothesis(lattice, hypothesis, lm_scale)

    def test_count_paths_diamond(self, diamond_text):
        assert Lattice.from_string(diamond_text).count_all_paths() == 2

    def test_count_paths_beyond_64_bits(self):
        lattice = chained_diamonds(70)
        assert lattice.count_all_paths() == 2 ** 70

    def test_count_paths_unreachable(self):
        lattice = make_lattice([(0, 1, "a", 1, 1)], 3, end=2)
        assert lattice.count_all_paths() == 0

    def test_count_paths_single_node(self):
        assert make_lattice([], 1, start=0, end=0).count_all_paths() == 1

    def test_density(self, diamond_text):
        assert Lattice.from_string(diamond_text).get_lattice_density() == pytest.approx(4.0)

    def test_density_zero_end_time(self):
        assert math.isinf(make_lattice([(0, 1, "a", 1, 1)], 2).get_lattice_density())
        assert math.isnan(make_lattice([(0, 1, SILENCE_LABEL, 1, 1)], 2).get_lattice_density())


class TestLatticeQueries:
    """Test time and word queries."""

    def test_unique_words_at_time(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        assert lattice.unique_words_at_time(0.25) == {"a", "b"}
        assert lattice.unique_words_at_time(0.5) == {"a", "b", "c", "d"}
        assert lattice.unique_words_at_time(2.0) == set()

    def test_sorted_hits(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        assert lattice.sorted_hits("a") == ["0.25"]
        assert lattice.sorted_hits("missing") == []

    def test_sorted_hits_are_string_sorted(self):
        lattice = make_lattice(
            [(0, 1, "x", 1, 1), (1, 2, "x", 1, 1), (2, 3, "y", 1, 1)], 4, times=[9.0, 10.0, 10.0, 10.0]
        )
        assert lattice.sorted_hits("x") == ["10.00", "9.50"]

    def test_print_sorted_hits(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        out = io.StringIO()
        lattice.print_sorted_hits("c", file=out)
        lattice.print_sorted_hits("missing", file=out)
        assert out.getvalue() == "0.75\n"


class TestLatticeSerialization:
    """Test text and dot output."""

    def test_to_string(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        assert lattice.to_string() == diamond_text
        assert str(lattice) == diamond_text

    def test_save_and_reload(self, diamond_text, tmp_path):
        lattice = Lattice.from_string(diamond_text)
        out = tmp_path / "saved.lat"
        lattice.save_as_file(out)
        assert Lattice(out).to_string() == lattice.to_string()

    def test_to_dot(self, diamond_text):
        dot = Lattice.from_string(diamond_text).to_dot()
        assert dot.splitlines() == [
            "digraph g {",
            '   rankdir="LR"',
            '   0 -> 1 [label = "a"]',
            '   0 -> 2 [label = "b"]',
            '   1 -> 3 [label = "c"]',
            '   2 -> 3 [label = "d"]',
            "}",
        ]

    def test_write_as_dot(self, diamond_text, tmp_path):
        lattice = Lattice.from_string(diamond_text)
        out = tmp_path / "diamond.dot"
        lattice.write_as_dot(out)
        assert out.read_text(encoding="utf-8") == lattice.to_dot()

    def test_edges_row_major(self):
        lattice = make_lattice([(2, 3, "d", 1, 1), (0, 2, "b", 1, 1), (0, 1, "a", 1, 1), (1, 3, "c", 1, 1)], 4)
        assert [(i, j) for i, j, _ in lattice.edges()] == [(0, 1), (0, 2), (1, 3), (2, 3)]

    def test_get_stats(self, diamond_text):
        stats = Lattice.from_string(diamond_text).get_stats(1.0)
        assert stats.utterance_id == "diamond"
        assert stats.num_paths == 2
        assert stats.density == pytest.approx(4.0)
        assert stats.best_hypothesis == "a c"
        assert stats.best_score == pytest.approx(4.0)
