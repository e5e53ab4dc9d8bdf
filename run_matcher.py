"""This module provides the command-line entry point for the term matcher."""

import argparse
import json
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from src.matcher import logger
from src.matcher.config import (
    ConfigBoolParsingError,
    ConfigNotFoundError,
    MatcherConfig,
    load_config_file,
)
from src.matcher.exceptions import MatcherError
from src.matcher.fast_matcher import FastMatcher, TokenPair
from src.matcher.offset_position import OffsetPosition

MODES = ["text", "words", "tokens", "reconstructed"]


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse the command-line arguments.

    Args:
        argv (Optional[list[str]]): Arguments to parse, sys.argv by default.

    Returns:
        argparse.Namespace: The parsed arguments.

    """
    parser = argparse.ArgumentParser(
        description="Find dictionary terms in a text or token stream.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--config_path",
        type=str,
        help="Path to a key=value config file naming the term file.",
    )
    source.add_argument(
        "--terms",
        type=str,
        help="Path to a file listing one term per line.",
    )
    parser.add_argument(
        "--mode",
        default="text",
        choices=MODES,
        help="'text' matches raw text (character offsets), 'words' "
        "matches raw text (word positions), 'tokens' matches one token "
        "per line (token indices), 'reconstructed' rebuilds text "
        "from the tokens first (character offsets of the rebuilt text).",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Input file, '-' for stdin (default).",
    )
    return parser.parse_args(argv)


def read_tokens(
    content: str,
) -> tuple[list[str], Optional[list[TokenPair]]]:
    """Split token input into tokens and, when labels are present, pairs.

    Each line holds one token, optionally followed by a tab and a label.

    Args:
        content (str): The raw input.

    Returns:
        tuple: The tokens, and the (token, label) pairs or None when no
        line carries a label.

    """
    lines = content.splitlines()

    if not any("\t" in line for line in lines):
        return lines, None

    pairs: list[TokenPair] = []
    for line in lines:
        token, _sep, label = line.partition("\t")
        pairs.append((token, label))
    return [token for token, _label in pairs], pairs


def run(
    matcher: FastMatcher,
    mode: str,
    content: str,
) -> list[dict[str, Union[int, str]]]:
    """Match the input according to the selected mode.

    Args:
        matcher (FastMatcher): A loaded matcher.
        mode (str): One of MODES.
        content (str): The raw input.

    Returns:
        list[dict]: JSON-ready spans, with the matched text in text mode.

    """
    positions: list[OffsetPosition]
    if mode == "text":
        positions = matcher.match_text(content)
        return [
            {**pos.to_dict(), "text": content[pos.start : pos.end]}
            for pos in positions
        ]

    if mode == "words":
        positions = matcher.match_text_word_positions(content)
        return [pos.to_dict() for pos in positions]

    tokens, pairs = read_tokens(content)
    if mode == "tokens":
        if pairs is not None:
            positions = matcher.match_token_pairs(pairs)
        else:
            positions = matcher.match_tokens(tokens)
    elif pairs is not None:
        positions = matcher.match_reconstructed_pairs(pairs)
    else:
        positions = matcher.match_reconstructed_tokens(tokens)
    return [pos.to_dict() for pos in positions]


def read_input(input_path: str) -> str:
    """Read the whole input from a file or from stdin."""
    if input_path == "-":
        return sys.stdin.read()
    return Path(input_path).read_text(encoding="utf-8")


def main(argv: Optional[list[str]] = None) -> int:
    """Run the matcher once over the input and print JSON results."""
    args = parse_arguments(argv)

    config: Optional[MatcherConfig] = None
    try:
        if args.config_path is not None:
            config = load_config_file(Path(args.config_path))
            matcher = FastMatcher.from_config(config)
        else:
            matcher = FastMatcher.from_file(args.terms)
        content = read_input(args.input)
    except (
        ConfigBoolParsingError,
        ConfigNotFoundError,
        MatcherError,
        OSError,
        ValueError,
    ) as e:
        print(f"[MATCHER ERROR] {e}", file=sys.stderr)
        return 1

    log_file = (
        config.log_file if config is not None and config.log_queries else None
    )
    log_queries = log_file is not None
    if log_file is not None:
        logger.setup_logging_queue()
        logger.setup_queue_logging()
        logger.start_logging_listener(log_file)

    try:
        start = time.perf_counter()
        results: list[dict[str, Any]] = run(matcher, args.mode, content)
        elapsed_ms = (time.perf_counter() - start) * 1000

        if log_queries:
            logger.log(
                datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                args.input if args.input != "-" else "stdin",
                args.mode,
                len(content),
                len(results),
                elapsed_ms,
            )
    finally:
        if log_queries:
            logger.stop_logging_listener()
            logger.teardown_queue_logging()

    print(json.dumps(results, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
