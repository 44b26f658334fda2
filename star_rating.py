"""
star_rating.py

Command line entrypoint that rates one beatmap JSON file.

Usage
- strainstar path/to/beatmap.json
- strainstar path/to/beatmap.json --mods DTHR
- strainstar path/to/beatmap.json --all

Output
- stdout receives exactly one JSON document:
  {"ok": true, "beatmap": "...", "attributes": {...}}
  {"ok": true, "beatmap": "...", "results": [{...}, ...]}   (with --all)
  {"ok": false, "error": "..."}                              (exit code 2)
- --mods and --all are mutually exclusive; argparse rejects the pair with exit code 2.
- Log lines go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from beatmap_models import load_beatmap_json
from config import AppConfig, load_config
from difficulty_calculator import OsuDifficultyCalculator
from mods import parse_mods

logger = logging.getLogger(__name__)


def _build_argument_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(prog="strainstar", description="Compute difficulty attributes for a beatmap.")
    argument_parser.add_argument("beatmap", type=Path, help="Beatmap JSON file.")
    mod_selection = argument_parser.add_mutually_exclusive_group()
    mod_selection.add_argument("--mods", default="", help="Mod acronyms, for example DTHR or DT,HD.")
    mod_selection.add_argument("--all", action="store_true", help="Rate every difficulty adjustment mod combination.")
    argument_parser.add_argument("--config", type=Path, default=None, help="Config JSON file.")
    argument_parser.add_argument("--log-level", default=None, help="Override the configured log level.")
    return argument_parser


def _configure_logging(app_config: AppConfig, override_level: Optional[str]) -> None:
    level_name = (override_level or app_config.logging.level).strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_json(payload: Dict[str, Any], app_config: Optional[AppConfig]) -> None:
    indent = 2
    sort_keys = False
    if app_config is not None:
        indent = int(app_config.output.indent)
        sort_keys = bool(app_config.output.sort_keys)
    print(json.dumps(payload, ensure_ascii=False, indent=indent, sort_keys=sort_keys))


def run(argv: Optional[List[str]] = None) -> int:
    parsed_args = _build_argument_parser().parse_args(argv)

    app_config: Optional[AppConfig] = None
    try:
        app_config, config_path = load_config(parsed_args.config)
        _configure_logging(app_config, parsed_args.log_level)
        logger.info("Using config %s", config_path if config_path is not None else "(defaults)")

        beatmap = load_beatmap_json(parsed_args.beatmap)
        calculator = OsuDifficultyCalculator(beatmap, settings=app_config.strain)

        if parsed_args.all:
            results = calculator.calculate_all()
            payload: Dict[str, Any] = {
                "ok": True,
                "beatmap": beatmap.title,
                "results": [attributes.to_dict() for attributes in results],
            }
        else:
            attributes = calculator.calculate(parse_mods(parsed_args.mods))
            payload = {"ok": True, "beatmap": beatmap.title, "attributes": attributes.to_dict()}
    except (ValueError, OSError) as exception:
        logger.debug("Calculation failed", exc_info=True)
        _print_json({"ok": False, "error": str(exception)}, app_config)
        return 2

    _print_json(payload, app_config)
    return 0


def main() -> int:
    return run()


if __name__ == "__main__":
    raise SystemExit(main())
