#!/usr/bin/env python3
"""Generate FFT launcher sources from a kernel catalog.

Usage:
    python scripts/generate_kernels.py --catalog examples/catalog.json --out build/kernels --groups 4
"""

from __future__ import annotations

import argparse
import logging
import sys

from fft_generator import FFTGeneratorError, TargetConfig, generate_to_directory


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate FFT kernel launchers and dispatch tables")
    parser.add_argument("--catalog", required=True, help="Catalog JSON (small / large1d / fused2d)")
    parser.add_argument("--out", required=True, help="Output directory for generated sources")
    parser.add_argument("--groups", type=int, default=None, help="Number of small-kernel launcher units")
    parser.add_argument("--max-work-group-size", type=int, default=256, help="Device work-group size limit")
    parser.add_argument("--prefix", default="fft_internal_dfn", help="Launcher symbol prefix")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = TargetConfig(max_work_group_size=args.max_work_group_size, symbol_prefix=args.prefix)
    try:
        result = generate_to_directory(args.catalog, args.out, config=config, group_count=args.groups)
    except (FFTGeneratorError, ValueError, KeyError, OSError) as e:
        print(f"Generation failed: {e}", file=sys.stderr)
        return 1

    print(f"Generated {len(result.symbols)} launchers in {len(result.artifacts)} files under {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
