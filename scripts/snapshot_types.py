#!/usr/bin/env python3
"""
Snapshot the policy DSL's type declarations for the playground editor.

Writes one .pyi file the editor bridge installs as a virtual document:
  1. copies rls_playground/dsl/bundle.pyi when present;
  2. otherwise synthesizes declarations from the DSL modules;
  3. otherwise writes a stub that re-exports the DSL.

Never fails the build: errors are reported and the script still exits 0.

Usage:
  python scripts/snapshot_types.py [--output PATH] [--bundle PATH]
"""

import argparse
import logging
import sys
from pathlib import Path

from rls_playground.editor.snapshot import BUNDLE_PATH, DEFAULT_SNAPSHOT_PATH, build_type_snapshot


def main() -> int:
    parser = argparse.ArgumentParser(description="Snapshot policy DSL type declarations")
    parser.add_argument("--output", type=Path, default=DEFAULT_SNAPSHOT_PATH, help="Target .pyi file")
    parser.add_argument("--bundle", type=Path, default=BUNDLE_PATH, help="Preferred bundled .pyi")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        origin = build_type_snapshot(args.output, args.bundle)
    except Exception as e:
        print(f"Error writing type snapshot: {e}", file=sys.stderr)
        return 0
    print(f"Type snapshot written to {args.output} ({origin.value.lower()})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
