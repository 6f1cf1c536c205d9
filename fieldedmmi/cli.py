"""Render recognized mentions (JSON Lines) as Fielded MMI JSON.

Usage:
    fielded-mmi mentions.jsonl
    fielded-mmi mentions.jsonl --index mesh_treecodes.txt --output out.json
    fielded-mmi mentions.jsonl --config fieldedmmi.toml --strict
"""

import argparse
import logging
import sys
from pathlib import Path

from fieldedmmi.config import load_config
from fieldedmmi.errors import MmiError
from fieldedmmi.logging import set_level, setup_logging
from fieldedmmi.mention import load_mentions
from fieldedmmi.render import MmiJsonRenderer

logger = setup_logging()


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render concept mentions as Fielded MMI JSON")
    parser.add_argument("mentions", type=Path, help="JSON Lines file, one mention per line")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Output file (default: stdout)")
    parser.add_argument("--config", type=Path, default=None, help="TOML config file")
    parser.add_argument("--index", type=Path, default=None, help="Treecode index file (overrides config)")
    parser.add_argument("--strict", action="store_true", help="Fail on mentions missing a document or concept id")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_arguments(argv)
    if args.verbose:
        set_level(logging.DEBUG)

    try:
        config = load_config(args.config)
        updates = {}
        if args.index is not None:
            updates["index"] = config.index.model_copy(update={"path": args.index})
        if args.strict:
            updates["render"] = config.render.model_copy(update={"strict": True})
        if updates:
            config = config.model_copy(update=updates)

        renderer = MmiJsonRenderer.from_config(config)
        mentions = load_mentions(args.mentions)
        logger.info(f"Loaded {len(mentions)} mentions from {args.mentions}")

        # Render before opening the output so a failed run leaves it untouched.
        result = renderer.render(mentions)
        text = MmiJsonRenderer.serialize(result) + "\n"
        if args.output is None:
            sys.stdout.write(text)
        else:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(text)
    except (MmiError, OSError) as e:
        logger.error(f"fielded-mmi: {e}")
        return 1

    if result.rejected or any(d.rejected for d in result.documents):
        skipped = len(result.rejected) + sum(len(d.rejected) for d in result.documents)
        logger.warning(f"Skipped {skipped} invalid mentions")
    return 1 if result.documents_failed else 0


if __name__ == "__main__":
    sys.exit(main())
