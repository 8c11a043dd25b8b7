"""
Lexigraph Lattice Package

This package reads speech recognition lattices in the simplified lattice format
and runs the classical DAG algorithms over them.

Key modules:
- core: Lattice structure, topological sort, best-path decoding, path counting
- validation: Structural and decoder consistency checks
"""

from .core import (
    Lattice,
    LatticeParseError,
    SILENCE_LABEL
)

from .validation import (
    validate_topological_order,
    validate_lattice_structure,
    validate_hypothesis
)

__all__ = [
    # Core
    "Lattice",
    "LatticeParseError",
    "SILENCE_LABEL",

    # Validation
    "validate_topological_order",
    "validate_lattice_structure",
    "validate_hypothesis"
]
