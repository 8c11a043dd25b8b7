"""
Test suite for lexigraph.lattice.validation.
"""

import pytest

from lexigraph.lattice import (
    Lattice,
    validate_hypothesis,
    validate_lattice_structure,
    validate_topological_order
)
from lexigraph.schema.hypothesis import Hypothesis


class TestLatticeValidation:
    """Test structural and decoder consistency checks."""

    def test_structure_stats(self, diamond_text):
        stats = validate_lattice_structure(Lattice.from_string(diamond_text))
        assert stats["num_nodes"] == 4
        assert stats["stored_edges"] == 4
        assert stats["non_silence_words"] == 4
        assert stats["duration"] == pytest.approx(1.0)

    def test_edge_into_start(self):
        lattice = Lattice.from_string(
            "id x start 1 end 2 numNodes 3 numEdges 2 edge 0 1 a 1 1 edge 1 2 b 1 1"
        )
        with pytest.raises(ValueError, match="Start node 1 has incoming edge"):
            validate_lattice_structure(lattice)

    def test_time_goes_backwards(self):
        lattice = Lattice.from_string(
            "id x start 0 end 1 numNodes 2 numEdges 1 node 0 1.0 node 1 0.5 edge 0 1 a 1 1"
        )
        with pytest.raises(ValueError, match="goes back in time"):
            validate_lattice_structure(lattice)

    def test_topological_order_rejects_backward_edge(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        validate_topological_order(lattice, [0, 2, 1, 3])
        with pytest.raises(ValueError, match="violates the ordering"):
            validate_topological_order(lattice, [3, 0, 1, 2])
        with pytest.raises(ValueError, match="duplicate"):
            validate_topological_order(lattice, [0, 0, 1, 2])

    def test_decoded_hypothesis_is_valid(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        validate_hypothesis(lattice, lattice.decode(1.0), 1.0)

    def test_hypothesis_off_the_graph(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        with pytest.raises(ValueError, match="does not extend any path"):
            validate_hypothesis(lattice, Hypothesis(pairs=[("a", 2.0), ("d", 2.0)]), 1.0)

    def test_hypothesis_stops_early(self, diamond_text):
        lattice = Lattice.from_string(diamond_text)
        with pytest.raises(ValueError, match="does not end at node 3"):
            validate_hypothesis(lattice, Hypothesis(pairs=[("a", 2.0)]), 1.0)
