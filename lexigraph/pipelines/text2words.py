#!/usr/bin/env python3
"""
text2words.py

Discover words in a character-segmented text by iteratively merging
high-association bigrams. Writes the final segmentation, the discovered
vocabulary and per-iteration statistics under --out, plus a dictionary hit
report when --dict is given.
"""
import argparse
import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from rich.markup import escape

from lexigraph.pipelines.shared.config_loader import default_config_path, load_pipeline_config
from lexigraph.pipelines.shared.pipeline_logging import setup_pipeline_logging, get_pipeline_logger
from lexigraph.pipelines.shared.rich_utils import display_summary_table
from lexigraph.schema.pipeline_config import WordifierConfig
from lexigraph.schema.wordifier_stats import WordifierIterationStats
from lexigraph.wordify import (
    get_vocabulary,
    load_dictionary,
    load_sentences,
    print_num_words_discovered,
    wordify
)

# Module-level logger that gets configured in main()
logger = None


def get_logger() -> logging.Logger:
    """Get the module logger, creating a basic one if none exists."""
    global logger
    if logger is None:
        logger = get_pipeline_logger('text2words')
    return logger


def parse_args(argv: Optional[Sequence[str]] = None):
    p = argparse.ArgumentParser(
        prog="text2words",
        description="Unsupervised word discovery over character-segmented text"
    )
    p.add_argument(
        "-i", "--in",
        dest="infile", type=Path, required=True,
        help="Whitespace-separated input text"
    )
    p.add_argument(
        "-o", "--out",
        dest="outdir", type=Path, required=True,
        help="Output directory for segmented.txt, vocab.json and iterations.json"
    )
    p.add_argument(
        "-c", "--config",
        dest="config", type=Path,
        default=default_config_path("text2words"),
        help="Path to YAML hyperparams (default: config/pipelines/text2words.yaml)"
    )
    p.add_argument(
        "-d", "--dict",
        dest="dictionary", type=Path, default=None,
        help="Optional dictionary file used to report discovered words"
    )
    return p.parse_args(argv)


def save_outputs(out: Path, segmented: List[str], vocab: Dict[str, int], history: List[WordifierIterationStats]) -> None:
    """Write the segmentation, vocabulary and iteration history."""
    logger = get_logger()
    out.mkdir(parents=True, exist_ok=True)

    (out / "segmented.txt").write_text(" ".join(segmented) + "\n", encoding="utf-8")

    ordered = dict(sorted(vocab.items(), key=lambda item: (-item[1], item[0])))
    with open(out / "vocab.json", "w", encoding="utf-8") as f:
        json.dump(ordered, f, ensure_ascii=False, indent=2)

    with open(out / "iterations.json", "w", encoding="utf-8") as f:
        json.dump([stats.to_dict() for stats in history], f, ensure_ascii=False, indent=2)

    logger.info(f"Saved outputs to {out}: segmented.txt, vocab.json ({len(vocab):,} entries), iterations.json")


def report_dictionary_hits(out: Path, vocab: Dict[str, int], dictionary_path: Path) -> Tuple[int, int]:
    """Write discovered.txt listing vocabulary entries found in the dictionary."""
    logger = get_logger()
    dictionary = load_dictionary(dictionary_path)
    with open(out / "discovered.txt", "w", encoding="utf-8") as f:
        unique_words, total_words = print_num_words_discovered(vocab, dictionary, file=f)
    logger.info(f"Dictionary hits: {unique_words:,} unique words, {total_words:,} occurrences")
    return unique_words, total_words


def run(
    infile: Path,
    out: Path,
    cfg: WordifierConfig,
    dictionary_path: Optional[Path] = None
) -> Tuple[List[str], List[WordifierIterationStats]]:
    """Load the text, run word discovery and write every output."""
    logger = get_logger()
    logger.info("=" * 50)
    logger.info("STAGE 1: TEXT LOADING")
    logger.info("=" * 50)
    data = load_sentences(infile)

    logger.info("=" * 50)
    logger.info("STAGE 2: WORD DISCOVERY")
    logger.info("=" * 50)
    segmented, history = wordify(data, cfg.iterations, cfg.count_threshold, cfg.probability_threshold)
    vocab = get_vocabulary(segmented)

    save_outputs(out, segmented, vocab, history)
    if dictionary_path is not None:
        report_dictionary_hits(out, vocab, dictionary_path)

    if history:
        display_summary_table(
            "Word Discovery",
            ["Iteration", "New words", "Tokens", "Merged", "Vocabulary"],
            [
                (s.iteration, len(s.new_words), f"{s.tokens_before:,} → {s.tokens_after:,}", s.format_compression(), f"{s.vocabulary_size:,}")
                for s in history
            ]
        )
    return segmented, history


def main(argv: Optional[Sequence[str]] = None):
    args = parse_args(argv)

    global logger
    logger = setup_pipeline_logging(args.outdir, 'text2words', 'text2words.log')

    logger.info("COMMAND LINE ARGUMENTS:")
    logger.info(f"  Input file: {args.infile}")
    logger.info(f"  Output directory: {args.outdir}")
    logger.info(f"  Config file: {args.config}")
    logger.info(f"  Dictionary: {args.dictionary or '(none)'}")
    logger.info("-" * 80)

    pipeline_start_time = time.time()
    try:
        cfg = load_pipeline_config(args.config, WordifierConfig)
        segmented, history = run(args.infile, args.outdir, cfg, args.dictionary)
    except (OSError, ValueError) as e:
        logger.error(f"[red]Pipeline failed:[/red] {escape(str(e))}")
        sys.exit(1)

    pipeline_time = time.time() - pipeline_start_time
    logger.info("=" * 80)
    logger.info("PIPELINE COMPLETION SUMMARY")
    logger.info("=" * 80)
    logger.info(f"Pipeline completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info(f"Total execution time: {pipeline_time:.2f} seconds")
    logger.info(f"Iterations run: {len(history)}")
    logger.info(f"Final token count: {len(segmented):,}")
    logger.info(f"[bold green]✅ Word discovery complete! → {args.outdir / 'vocab.json'}[/bold green]")


if __name__ == "__main__":
    main()
