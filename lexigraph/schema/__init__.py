# lexigraph/schema/__init__.py
from .lattice import Edge, LatticeStats
from .hypothesis import Hypothesis
from .species import Species
from .tree_stats import TreeStats
from .wordifier_stats import WordifierIterationStats
from .pipeline_config import LatticeConfig, PhyloConfig, WordifierConfig
