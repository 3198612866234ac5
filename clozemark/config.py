"""Configuration helpers: clozemark directory discovery, settings, frontmatter parsing."""

import os
import pathlib
import sys

DEFAULT_SETTINGS = {
    "placeholder": "[...]",
    "preview_length": 50,
    "badge_length": 20,
    "renderer": "mathjax",
}


def get_clozemark_dir() -> pathlib.Path:
    env_dir = os.environ.get("CLOZEMARK_DIR")
    if env_dir:
        print(f"Using CLOZEMARK_DIR={env_dir}", file=sys.stderr)
        return pathlib.Path(env_dir)
    config_path = pathlib.Path.home() / ".config" / "clozemark" / "config"
    if config_path.exists():
        for line in config_path.read_text().splitlines():
            line = line.strip()
            if line.startswith("DIR="):
                return pathlib.Path(line[4:].strip())
    return pathlib.Path.home() / ".local" / "share" / "clozemark"


def load_settings(clozemark_dir: pathlib.Path) -> dict:
    settings_path = clozemark_dir / "settings.toml"
    settings = dict(DEFAULT_SETTINGS)
    if settings_path.exists():
        settings.update(_parse_toml_simple(settings_path.read_text()))
    return settings


def _parse_toml_simple(text: str) -> dict:
    """Minimal TOML parser for flat key=value files."""
    result = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip()
            if v.startswith('"') and v.endswith('"'):
                v = v[1:-1]
            elif v.isdigit():
                v = int(v)
            elif v == "true":
                v = True
            elif v == "false":
                v = False
            result[k] = v
    return result


def parse_frontmatter(text: str) -> tuple[dict, str]:
    """Parse YAML frontmatter from markdown. Returns (metadata, body)."""
    meta, body, body_start_line = split_frontmatter(text)
    if body_start_line == 1:
        return meta, body
    return meta, body.strip()


def split_frontmatter(text: str) -> tuple[dict, str, int]:
    """Split frontmatter from markdown without trimming the body.

    Returns (metadata, body, body_start_line). Text without a closed
    ``---`` block comes back unchanged with body_start_line 1.
    """
    if not text.startswith("---"):
        return {}, text, 1
    end = text.find("\n---", 3)
    if end == -1:
        return {}, text, 1
    yaml_block = text[3:end].strip()
    body = text[end + 4:]
    body_start_line = text[:end + 4].count("\n") + 1
    meta = {}
    for line in yaml_block.splitlines():
        line = line.strip()
        if ":" in line:
            k, v = line.split(":", 1)
            meta[k.strip()] = _parse_value(v.strip())
    return meta, body, body_start_line


def _parse_value(v: str):
    if v.startswith("[") and v.endswith("]"):
        return [x.strip().strip('"').strip("'") for x in v[1:-1].split(",") if x.strip()]
    if len(v) >= 2 and v[0] == v[-1] and v[0] in "\"'":
        return v[1:-1]
    if v.lower() == "true":
        return True
    if v.lower() == "false":
        return False
    if v.isdigit():
        return int(v)
    return v
