"""
Test suite for lexigraph.schema models.
"""

import json
import math

import pytest
from pydantic import ValidationError

from lexigraph.schema import (
    Edge,
    Hypothesis,
    LatticeConfig,
    LatticeStats,
    PhyloConfig,
    Species,
    TreeStats,
    WordifierConfig,
    WordifierIterationStats
)


class TestEdge:
    def test_cost(self):
        edge = Edge(label="hello", am_score=1520, lm_score=36)
        assert edge.cost(0.0) == 1520
        assert edge.cost(8.0) == pytest.approx(1520 + 8.0 * 36)

    def test_frozen(self):
        edge = Edge(label="a", am_score=1, lm_score=1)
        with pytest.raises(ValidationError):
            edge.label = "b"

    def test_rejects_float_scores(self):
        with pytest.raises(ValidationError):
            Edge(label="a", am_score=1.5, lm_score=1)


class TestHypothesis:
    def test_add_word(self):
        hypothesis = Hypothesis()
        hypothesis.add_word("a", 2.0)
        hypothesis.add_word("c", 2.0)
        assert hypothesis.words == ["a", "c"]
        assert hypothesis.scores == [2.0, 2.0]
        assert hypothesis.total_score == 4.0
        assert str(hypothesis) == "a c"
        assert len(hypothesis) == 2

    def test_instances_do_not_share_pairs(self):
        first, second = Hypothesis(), Hypothesis()
        first.add_word("a", 1.0)
        assert second.pairs == []


class TestStatsModels:
    def test_lattice_stats_json(self):
        stats = LatticeStats(
            utterance_id="u1", num_nodes=4, num_edges=4, non_silence_words=4,
            num_paths=2 ** 70, density=4.0, lm_scale=1.0, best_hypothesis="a c", best_score=4.0
        )
        data = json.loads(stats.model_dump_json())
        assert data["num_paths"] == 2 ** 70
        assert data["best_hypothesis"] == "a c"

    def test_lattice_stats_non_finite_density(self):
        for density, literal in ((float("inf"), "Infinity"), (float("nan"), "NaN")):
            stats = LatticeStats(
                utterance_id="u1", num_nodes=2, num_edges=1, non_silence_words=1,
                num_paths=1, density=density, lm_scale=1.0
            )
            dumped = stats.model_dump_json()
            assert f'"density":{literal}' in dumped
            value = json.loads(dumped)["density"]
            assert math.isnan(value) if math.isnan(density) else value == math.inf

    def test_tree_stats_empty_weighted_height_json(self):
        stats = TreeStats(species_count=0, height=-1, weighted_height=float("-inf"))
        assert '"weighted_height":-Infinity' in stats.model_dump_json()
        assert json.loads(stats.model_dump_json())["weighted_height"] == -math.inf

    def test_lattice_stats_rejects_negative_counts(self):
        with pytest.raises(ValidationError):
            LatticeStats(utterance_id="u1", num_nodes=-1, num_edges=0, non_silence_words=0, num_paths=0, density=0.0, lm_scale=1.0)

    def test_tree_stats_defaults(self):
        stats = TreeStats(species_count=0, height=-1, weighted_height=float("-inf"))
        assert stats.root_label is None
        assert stats.newick == ""

    def test_iteration_stats_round_trip(self):
        stats = WordifierIterationStats(iteration=1, tokens_before=8, tokens_after=4, unique_bigrams=2, total_bigrams=7, new_words=["ab"], vocabulary_size=1)
        assert WordifierIterationStats.from_dict(stats.to_dict()) == stats
        assert stats.merges == 4

    def test_iteration_stats_compression_empty(self):
        stats = WordifierIterationStats(iteration=1, tokens_before=0, tokens_after=0, unique_bigrams=0, total_bigrams=0)
        assert stats.format_compression() == "0.00%"


class TestSpecies:
    def test_from_string(self):
        species = Species.from_string("Homo_sapiens", "MALW")
        assert species.sequence == ["M", "A", "L", "W"]
        assert len(species) == 4


class TestPipelineConfigs:
    def test_defaults(self):
        assert LatticeConfig().lm_scale == 1.0
        assert PhyloConfig().printing_depth == 100
        cfg = WordifierConfig()
        assert (cfg.iterations, cfg.count_threshold, cfg.probability_threshold) == (10, 5, 0.5)

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            LatticeConfig.model_validate({"lm_scael": 2.0})

    def test_negative_printing_depth_rejected(self):
        with pytest.raises(ValidationError):
            PhyloConfig(printing_depth=-1)

    def test_distance_pairs(self):
        cfg = PhyloConfig.model_validate({"distance_pairs": [["A", "C"]]})
        assert cfg.distance_pairs == [("A", "C")]
