#!/usr/bin/env python3
"""
Command line front end for wallpaper-watcher.

``decide`` reports placement and background color for one image,
``pick`` draws a usable wallpaper from files/directories. Applying the
result to the desktop is left to the platform's wallpaper service.
"""

import argparse
import json
import logging
import random
import sys

from .chooser import WallpaperChooser, enumerate_candidates
from .config import load_settings, WallpaperConfig
from .domain import Dimensions, WallpaperDecision
from .engine import decide
from .image_source import LOAD_ERRORS, load_image


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    logging.getLogger('PIL').setLevel(logging.WARNING)


def decision_to_dict(path: str, decision: WallpaperDecision, include_trace: bool) -> dict:
    result = {
        'path': path,
        'mode': decision.mode.value,
        'color': decision.color.hex if decision.color else None,
    }
    if include_trace:
        result['trace'] = decision.trace
    return result


def print_decision(path: str, decision: WallpaperDecision, args):
    if args.json:
        print(json.dumps(decision_to_dict(path, decision, args.trace), indent=2))
        return
    color = decision.color.hex if decision.color else '-'
    print(f"{path}\t{decision.mode.value}\t{color}")
    if args.trace:
        for line in decision.trace:
            print(f"  {line}")


def cmd_decide(args, config: WallpaperConfig) -> int:
    try:
        loaded = load_image(args.image, config)
        decision = decide(loaded.buffer, args.screen, config, image_size=loaded.size)
    except LOAD_ERRORS as e:
        logging.error(f"Could not analyse {args.image}: {e}")
        return 1
    print_decision(args.image, decision, args)
    return 0


def cmd_pick(args, config: WallpaperConfig, settings: dict) -> int:
    paths = args.paths or settings.get('image_paths') or []
    candidates = enumerate_candidates(paths, settings.get('extensions'))
    if not candidates:
        logging.error("No candidate images found")
        return 1
    chooser = WallpaperChooser(candidates, args.screen, config, rng=random.Random(args.seed))
    chosen = chooser.next_wallpaper()
    if chosen is None:
        return 1
    print_decision(chosen.path, chosen.decision, args)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Pick wallpaper placement and letterbox color')
    parser.add_argument('--config', '-c', help='JSON settings file (default: ~/.wallpaper_watcher_config.json)')
    parser.add_argument('--screen', '-s', type=Dimensions.parse, required=True,
                        help='Screen size as WIDTHxHEIGHT, e.g. 1920x1080')
    parser.add_argument('--json', action='store_true', help='Print JSON instead of tab separated text')
    parser.add_argument('--trace', action='store_true', help='Include the decision trace')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    sub = parser.add_subparsers(dest='command', required=True)
    p_decide = sub.add_parser('decide', help='Decide placement and color for one image')
    p_decide.add_argument('image', help='Image file path')
    p_pick = sub.add_parser('pick', help='Pick a usable wallpaper from files/directories')
    p_pick.add_argument('paths', nargs='*', help='Files or directories (default: image_paths setting)')
    p_pick.add_argument('--seed', type=int, default=None, help='Random seed for reproducible picks')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    settings = load_settings(args.config)
    try:
        config = WallpaperConfig.from_mapping(settings)
    except ValueError as e:
        parser.error(f"invalid configuration: {e}")

    if args.command == 'decide':
        return cmd_decide(args, config)
    return cmd_pick(args, config, settings)


if __name__ == '__main__':
    sys.exit(main())
