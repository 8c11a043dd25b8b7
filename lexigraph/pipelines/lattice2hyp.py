#!/usr/bin/env python3
"""
lattice2hyp.py

Decode every lattice under --in and write, per utterance, the re-serialized
lattice, a Graphviz graph and a JSON summary (best hypothesis, path count,
density) under --out.
"""
import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from rich.markup import escape

from lexigraph.lattice import Lattice, LatticeParseError
from lexigraph.pipelines.shared.config_loader import default_config_path, load_pipeline_config
from lexigraph.pipelines.shared.pipeline_logging import setup_pipeline_logging, get_pipeline_logger
from lexigraph.pipelines.shared.rich_utils import display_summary_table
from lexigraph.schema.lattice import LatticeStats
from lexigraph.schema.pipeline_config import LatticeConfig

LATTICE_SUFFIX = ".lat"

# Module-level logger that gets configured in main()
logger = None


def get_logger() -> logging.Logger:
    """Get the module logger, creating a basic one if none exists."""
    global logger
    if logger is None:
        logger = get_pipeline_logger('lattice2hyp')
    return logger


def parse_args(argv: Optional[Sequence[str]] = None):
    p = argparse.ArgumentParser(
        prog="lattice2hyp",
        description="Decode speech recognition lattices into best hypotheses"
    )
    p.add_argument(
        "-i", "--in",
        dest="inpath", type=Path, required=True,
        help="Lattice file, or directory searched recursively for *.lat"
    )
    p.add_argument(
        "-o", "--out",
        dest="outdir", type=Path, required=True,
        help="Output directory for <id>.lat, <id>.dot and <id>.json"
    )
    p.add_argument(
        "-c", "--config",
        dest="config", type=Path,
        default=default_config_path("lattice2hyp"),
        help="Path to YAML hyperparams (default: config/pipelines/lattice2hyp.yaml)"
    )
    return p.parse_args(argv)


def find_lattice_files(inpath: Path) -> List[Path]:
    """Resolve --in to a sorted list of lattice files."""
    logger = get_logger()
    if not inpath.exists():
        logger.error(f"Input path does not exist: {inpath}")
        raise FileNotFoundError(f"Input path not found: {inpath}")

    if inpath.is_file():
        return [inpath]

    files = sorted(inpath.rglob(f"*{LATTICE_SUFFIX}"))
    if not files:
        raise FileNotFoundError(f"No {LATTICE_SUFFIX} files found under: {inpath}")

    logger.info(f"Found {len(files)} lattice files:")
    for i, f in enumerate(files, 1):
        logger.debug(f"  {i:3d}. {f}")
    return files


def process_lattice(path: Path, out: Path, cfg: LatticeConfig) -> LatticeStats:
    """Decode one lattice, write its outputs and return its summary."""
    logger = get_logger()
    lattice = Lattice(path)
    stats = lattice.get_stats(cfg.lm_scale)
    uid = lattice.get_utterance_id()

    if cfg.write_lattice:
        lattice.save_as_file(out / f"{uid}.lat")
    if cfg.write_dot:
        lattice.write_as_dot(out / f"{uid}.dot")
    (out / f"{uid}.json").write_text(stats.model_dump_json(indent=2), encoding="utf-8")

    logger.info(f"[cyan]{escape(uid)}[/cyan]: '{escape(stats.best_hypothesis)}' (score {stats.best_score:g}, {stats.num_paths:,} paths, density {stats.density:.2f})")

    for word in cfg.hit_words:
        hits = lattice.sorted_hits(word)
        if hits:
            logger.info(f"  Hits for '{escape(word)}': {' '.join(hits)}")
        else:
            logger.debug(f"  No hits for '{word}'")
    for t in cfg.query_times:
        words = sorted(lattice.unique_words_at_time(t))
        logger.info(f"  Words at {t:.2f}: {escape(' '.join(words)) if words else '(none)'}")

    return stats


def run(inpath: Path, out: Path, cfg: LatticeConfig) -> List[LatticeStats]:
    """Process every lattice found under ``inpath``."""
    logger = get_logger()
    logger.info("=" * 50)
    logger.info("STAGE 1: LATTICE DECODING")
    logger.info("=" * 50)

    out.mkdir(parents=True, exist_ok=True)
    results = [process_lattice(path, out, cfg) for path in find_lattice_files(inpath)]

    display_summary_table(
        "Lattice Decoding",
        ["Utterance", "Paths", "Density", "Score", "Hypothesis"],
        [
            (s.utterance_id, f"{s.num_paths:,}", f"{s.density:.2f}", f"{s.best_score:g}", s.best_hypothesis)
            for s in results
        ]
    )
    return results


def main(argv: Optional[Sequence[str]] = None):
    args = parse_args(argv)

    global logger
    logger = setup_pipeline_logging(args.outdir, 'lattice2hyp', 'lattice2hyp.log')

    logger.info("COMMAND LINE ARGUMENTS:")
    logger.info(f"  Input: {args.inpath}")
    logger.info(f"  Output directory: {args.outdir}")
    logger.info(f"  Config file: {args.config}")
    logger.info("-" * 80)

    pipeline_start_time = time.time()
    try:
        cfg = load_pipeline_config(args.config, LatticeConfig)
        results = run(args.inpath, args.outdir, cfg)
    except LatticeParseError as e:
        logger.error(f"[red]Malformed lattice:[/red] {escape(str(e))}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"[red]Pipeline failed:[/red] {escape(str(e))}")
        sys.exit(1)

    pipeline_time = time.time() - pipeline_start_time
    logger.info("=" * 80)
    logger.info("PIPELINE COMPLETION SUMMARY")
    logger.info("=" * 80)
    logger.info(f"Pipeline completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info(f"Total execution time: {pipeline_time:.2f} seconds")
    logger.info(f"Lattices decoded: {len(results)}")
    logger.info(f"[bold green]✅ Decoding complete! → {args.outdir}[/bold green]")


if __name__ == "__main__":
    main()
