#!/usr/bin/env python3
"""haloguide guidance profile inspection / reset script"""

import argparse
import json
import sys

from haloguide.errors import StorageUnavailableError
from haloguide.storage import create_store
from haloguide.utils.config import Config
from haloguide.utils.constants import (
    ALL_GUIDANCE_KEYS, HINTS_DISMISSED_KEY, TUTORIALS_COMPLETED_KEY,
    ONBOARDING_PROGRESS_KEYS, ONBOARDING_COMPLETED_KEY
)
from haloguide.utils.helpers import setup_logging

RESET_TARGETS = {
    'all': ALL_GUIDANCE_KEYS,
    'hints': (HINTS_DISMISSED_KEY,),
    'tutorials': (TUTORIALS_COMPLETED_KEY,),
    'onboarding': ONBOARDING_PROGRESS_KEYS + (ONBOARDING_COMPLETED_KEY,),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect or reset a haloguide guidance profile")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--profile", help="Profile name (default from config)")
    parser.add_argument("--backend", choices=["json", "sqlite"], help="Override storage backend")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("show", help="Print stored guidance keys as JSON")
    reset = sub.add_parser("reset", help="Remove stored guidance keys")
    reset.add_argument("target", choices=sorted(RESET_TARGETS), help="What to reset")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    config = Config(args.config, create_default=False)
    if args.backend:
        config.storage.backend = args.backend
    store = create_store(config, profile=args.profile)
    profile = args.profile or config.storage.profile

    try:
        if args.command == "show":
            data = {}
            for key, value in store.items().items():
                try:
                    data[key] = json.loads(value)
                except ValueError:
                    data[key] = value
            print(json.dumps({"profile": profile, "keys": data}, indent=2, ensure_ascii=False))
            return 0

        for key in RESET_TARGETS[args.target]:
            store.remove(key)
        print(f"  [OK] Reset {args.target} for profile '{profile}'")
        return 0
    except StorageUnavailableError as e:
        print(f"  [ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
