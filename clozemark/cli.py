"""CLI: command-line interface for clozemark."""

import argparse
import json
import pathlib
import sys
from dataclasses import asdict

from clozemark.cloze import badge_text, group_keys, next_group_key, preview_text
from clozemark.config import get_clozemark_dir, load_settings
from clozemark.formula import substitute
from clozemark.renderers import get_renderer
from clozemark.sources import SourceError, content_hash, read_source, scan_sources


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return read_source(pathlib.Path(path))


def cmd_cards(args, settings: dict):
    paths = [pathlib.Path(p).resolve() for p in args.path] if args.path else [pathlib.Path.cwd()]
    results = scan_sources(paths, settings)

    if args.json:
        out = []
        for source_path, cards, _config in results:
            for card in cards:
                out.append({"source_path": source_path, "hash": content_hash(card), **asdict(card)})
        print(json.dumps(out, indent=2))
        return

    total_cards = sum(len(cards) for _, cards, _ in results)
    preview_length = settings.get("preview_length", 50)
    badge_length = settings.get("badge_length", 20)
    for source_path, cards, _config in results:
        if not cards:
            continue
        print(source_path)
        block_line = None
        for card in cards:
            if card.source_line != block_line:
                block_line = card.source_line
                preview = preview_text(card.text, preview_length).replace("\n", " ")
                print(f"  L{block_line}: {preview}")
            print(f"      {badge_text(card.group_key, card.hidden, badge_length)}")
    print(f"Found {total_cards} cards from {len(results)} source(s)")


def cmd_render(args, settings: dict, clozemark_dir: pathlib.Path):
    name = args.renderer or settings.get("renderer", "mathjax")
    try:
        renderer = get_renderer(name, clozemark_dir)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(substitute(_read_input(args.file), renderer))


def cmd_next_id(args):
    print(next_group_key(group_keys(_read_input(args.file))))


def main():
    parser = argparse.ArgumentParser(prog="clozemark",
                                     description="Cloze deletion and formula markup tools")
    subparsers = parser.add_subparsers(dest="command")

    p_cards = subparsers.add_parser("cards", help="List the cloze cards found in notes")
    p_cards.add_argument("path", nargs="*", help="Paths to scan (default: cwd)")
    p_cards.add_argument("--json", action="store_true", help="Print cards as JSON")

    p_render = subparsers.add_parser("render", help="Render formulas in a file to HTML")
    p_render.add_argument("file", help="File to render, or - for stdin")
    p_render.add_argument("--renderer", help="Renderer name (default: settings 'renderer')")

    p_next = subparsers.add_parser("next-id", help="Print the next unused cloze group key")
    p_next.add_argument("file", help="File to inspect, or - for stdin")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    clozemark_dir = get_clozemark_dir()
    settings = load_settings(clozemark_dir)

    try:
        if args.command == "cards":
            cmd_cards(args, settings)
        elif args.command == "render":
            cmd_render(args, settings, clozemark_dir)
        elif args.command == "next-id":
            cmd_next_id(args)
    except SourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
