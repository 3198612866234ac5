"""Source scanning: find cloze notes in files and directories, parse their cards."""

import hashlib
import json
import pathlib
import sys
from dataclasses import asdict

from clozemark.cards import parse_note
from clozemark.config import _parse_toml_simple, parse_frontmatter
from clozemark.models import Card

CARD_TYPE = "cloze"
DIR_CONFIG_NAME = ".clozemark.config"


class SourceError(Exception):
    """A card source could not be read."""


def content_hash(card: Card) -> str:
    return hashlib.sha256(json.dumps(asdict(card), sort_keys=True).encode()).hexdigest()


def read_source(path: pathlib.Path) -> str:
    try:
        return path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"cannot read {path}: {e}") from e


def scan_sources(paths: list[pathlib.Path], settings: dict | None = None
                 ) -> list[tuple[str, list[Card], dict]]:
    """Scan paths for cloze notes.

    Args:
        paths: File/directory paths to scan.
        settings: Loaded settings; supplies the placeholder for masked views.

    Returns list of (source_path, cards, config).
    """
    settings = settings or {}
    results = []
    seen_paths: set[str] = set()

    for path in paths:
        path = path.resolve()
        if path.is_file() and path.suffix == ".md":
            _scan_md_file(path, settings, results, seen_paths)
        elif path.is_dir():
            _scan_directory(path, settings, results, seen_paths)

    return results


def _with_settings(config: dict, settings: dict) -> dict:
    merged = dict(config)
    if "placeholder" in settings:
        merged.setdefault("placeholder", settings["placeholder"])
    return merged


def _scan_md_file(path: pathlib.Path, settings: dict, results: list, seen_paths: set):
    if str(path) in seen_paths:
        return
    seen_paths.add(str(path))
    try:
        text = read_source(path)
    except SourceError as e:
        print(f"Warning: {e}", file=sys.stderr)
        return
    meta, _body = parse_frontmatter(text)
    if meta.get("card_type") != CARD_TYPE:
        return
    results.append((str(path), parse_note(text, _with_settings(meta, settings)), meta))


def _scan_directory(dirpath: pathlib.Path, settings: dict, results: list, seen_paths: set):
    config_path = dirpath / DIR_CONFIG_NAME
    if config_path.exists():
        config = _parse_toml_simple(config_path.read_text())
        if config.get("card_type") != CARD_TYPE:
            print(f"Warning: {DIR_CONFIG_NAME} in {dirpath} missing 'card_type = \"cloze\"'",
                  file=sys.stderr)
            return
        for f in sorted(dirpath.iterdir()):
            if f.is_file() and f.name != DIR_CONFIG_NAME and str(f) not in seen_paths:
                seen_paths.add(str(f))
                try:
                    text = read_source(f)
                except SourceError as e:
                    print(f"Warning: {e}", file=sys.stderr)
                    continue
                results.append((str(f), parse_note(text, _with_settings(config, settings)), config))
    else:
        try:
            entries = sorted(dirpath.iterdir())
        except PermissionError:
            return
        for item in entries:
            if item.is_dir() and not item.name.startswith("."):
                _scan_directory(item, settings, results, seen_paths)
            elif item.is_file() and item.suffix == ".md":
                _scan_md_file(item, settings, results, seen_paths)
