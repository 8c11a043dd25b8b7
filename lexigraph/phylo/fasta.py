"""
FASTA species loader.

Headers carry six ``|``-delimited metadata fields followed by the species
name, e.g. ``>gi|5524211|gb|AAD44166.1|cyt|b|Elephas_maximus``. Sequence lines
that follow a header are concatenated and split into single-character tokens.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from lexigraph.schema.species import Species

logger = logging.getLogger(__name__)

HEADER_FIELDS = 6


def parse_species_name(header: str) -> Optional[str]:
    """
    Extract the species name from a FASTA header line.

    Returns:
        Text after the sixth ``|``, or None when the header has fewer than six
        delimiters, another ``|`` after the sixth, or an empty name
    """
    parts = header.split("|")
    if len(parts) != HEADER_FIELDS + 1:
        return None
    name = parts[HEADER_FIELDS].strip()
    return name or None


def parse_species(text: str, source: str = "<string>") -> List[Species]:
    """Parse species from FASTA text, skipping records with malformed headers."""
    species: List[Species] = []
    name: Optional[str] = None
    chunks: List[str] = []
    skipped = 0

    def flush():
        if name is not None:
            species.append(Species.from_string(name, "".join(chunks)))

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith(">"):
            flush()
            name = parse_species_name(stripped)
            chunks = []
            if name is None:
                skipped += 1
                logger.warning(f"Skipping malformed FASTA header in {source}: {stripped}")
        elif name is not None:
            chunks.extend(stripped.split())
    flush()

    logger.info(f"Loaded {len(species)} species from {source} ({skipped} skipped)")
    return species


def load_species_file(filename: Union[str, Path]) -> List[Species]:
    """
    Load all valid species from a FASTA file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(filename)
    with open(path, "r", encoding="utf-8") as f:
        return parse_species(f.read(), str(path))
