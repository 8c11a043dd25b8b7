"""
Shared fixtures for the lexigraph test suite.
"""

import logging
from pathlib import Path

import pytest


DIAMOND_LATTICE = """id diamond
start 0
end 3
numNodes 4
numEdges 4
node 0 0.00
node 1 0.50
node 2 0.50
node 3 1.00
edge 0 1 a 1 1
edge 0 2 b 2 1
edge 1 3 c 1 1
edge 2 3 d 1 1
"""

# d(A,B) = 0.2, d(A,C) = d(B,C) = 0.6
THREE_SPECIES_FASTA = """>gi|1|gb|X1|cyt|b|A
AAAAAAAAAA
>gi|2|gb|X2|cyt|b|B
AAAAAAAA
CC
>gi|3|gb|X3|cyt|b|C
GGGGGAAACA
"""


@pytest.fixture
def diamond_text() -> str:
    return DIAMOND_LATTICE


@pytest.fixture
def diamond_file(tmp_path: Path) -> Path:
    path = tmp_path / "diamond.lat"
    path.write_text(DIAMOND_LATTICE, encoding="utf-8")
    return path


@pytest.fixture
def species_text() -> str:
    return THREE_SPECIES_FASTA


@pytest.fixture
def species_file(tmp_path: Path) -> Path:
    path = tmp_path / "species.fasta"
    path.write_text(THREE_SPECIES_FASTA, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_root_handlers():
    """Close handlers installed by pipeline logging so temp dirs can be removed."""
    yield
    for handler in logging.root.handlers[:]:
        handler.close()
        logging.root.removeHandler(handler)
