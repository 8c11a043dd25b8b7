#!/usr/bin/env python3
"""
fasta2tree.py

Build a UPGMA phylogenetic tree from an aligned FASTA species file and write
the indented tree, its Newick form and a JSON summary under --out.
"""
import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from rich.markup import escape

from lexigraph.phylo import PhyloTree, load_species_file, validate_species_alignment
from lexigraph.pipelines.shared.config_loader import default_config_path, load_pipeline_config
from lexigraph.pipelines.shared.pipeline_logging import setup_pipeline_logging, get_pipeline_logger
from lexigraph.pipelines.shared.rich_utils import rich_log, display_summary_table
from lexigraph.schema.pipeline_config import PhyloConfig
from lexigraph.schema.tree_stats import TreeStats

# Module-level logger that gets configured in main()
logger = None


def get_logger() -> logging.Logger:
    """Get the module logger, creating a basic one if none exists."""
    global logger
    if logger is None:
        logger = get_pipeline_logger('fasta2tree')
    return logger


def parse_args(argv: Optional[Sequence[str]] = None):
    p = argparse.ArgumentParser(
        prog="fasta2tree",
        description="Infer a phylogenetic tree from aligned FASTA species"
    )
    p.add_argument(
        "-i", "--in",
        dest="infile", type=Path, required=True,
        help="FASTA species file"
    )
    p.add_argument(
        "-o", "--out",
        dest="outdir", type=Path, required=True,
        help="Output directory for tree.txt, tree.nwk and tree_stats.json"
    )
    p.add_argument(
        "-c", "--config",
        dest="config", type=Path,
        default=default_config_path("fasta2tree"),
        help="Path to YAML hyperparams (default: config/pipelines/fasta2tree.yaml)"
    )
    return p.parse_args(argv)


def run(infile: Path, out: Path, cfg: PhyloConfig) -> TreeStats:
    """Load species, cluster them and write every tree output."""
    logger = get_logger()
    logger.info("=" * 50)
    logger.info("STAGE 1: SPECIES LOADING")
    logger.info("=" * 50)

    species = load_species_file(infile)
    alignment = validate_species_alignment(species)
    logger.info(f"Alignment: {alignment['species']} species, {alignment['sequence_length']} columns")

    logger.info("=" * 50)
    logger.info("STAGE 2: UPGMA CLUSTERING")
    logger.info("=" * 50)

    tree = PhyloTree.from_species(species, cfg.printing_depth)
    stats = tree.get_stats()

    out.mkdir(parents=True, exist_ok=True)
    (out / "tree.txt").write_text(tree.to_string(), encoding="utf-8")
    (out / "tree.nwk").write_text(stats.newick + "\n", encoding="utf-8")
    (out / "tree_stats.json").write_text(stats.model_dump_json(indent=2), encoding="utf-8")

    rich_log(
        {
            "species_count": stats.species_count,
            "height": stats.height,
            "weighted_height": f"{stats.weighted_height:.5f}",
            "root_label": stats.root_label,
        },
        title="Tree",
        color="green"
    )

    if cfg.distance_pairs:
        rows = []
        for label1, label2 in cfg.distance_pairs:
            distance = tree.find_evolutionary_distance(label1, label2)
            ancestor = tree.find_least_common_ancestor(label1, label2)
            if ancestor is None:
                logger.warning(f"Species pair ({label1}, {label2}) not found in tree")
            rows.append((label1, label2, f"{distance:.5f}", ancestor.label if ancestor is not None else "—"))
            logger.debug(f"  d({label1}, {label2}) = {distance}")
        display_summary_table("Evolutionary Distances", ["Species 1", "Species 2", "Distance", "Common ancestor"], rows)

    return stats


def main(argv: Optional[Sequence[str]] = None):
    args = parse_args(argv)

    global logger
    logger = setup_pipeline_logging(args.outdir, 'fasta2tree', 'fasta2tree.log')

    logger.info("COMMAND LINE ARGUMENTS:")
    logger.info(f"  Input file: {args.infile}")
    logger.info(f"  Output directory: {args.outdir}")
    logger.info(f"  Config file: {args.config}")
    logger.info("-" * 80)

    pipeline_start_time = time.time()
    try:
        cfg = load_pipeline_config(args.config, PhyloConfig)
        stats = run(args.infile, args.outdir, cfg)
    except (OSError, ValueError) as e:
        logger.error(f"[red]Pipeline failed:[/red] {escape(str(e))}")
        sys.exit(1)

    pipeline_time = time.time() - pipeline_start_time
    logger.info("=" * 80)
    logger.info("PIPELINE COMPLETION SUMMARY")
    logger.info("=" * 80)
    logger.info(f"Pipeline completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info(f"Total execution time: {pipeline_time:.2f} seconds")
    logger.info(f"Species clustered: {stats.species_count}")
    logger.info(f"[bold green]✅ Tree complete! → {args.outdir / 'tree.nwk'}[/bold green]")


if __name__ == "__main__":
    main()
