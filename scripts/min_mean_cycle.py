#!/usr/bin/env python3
"""Report the minimum mean cycle of a CSV edge list.

Usage:
    python scripts/min_mean_cycle.py edges.csv
    python scripts/min_mean_cycle.py edges.csv --src-col from --dst-col to --json
    python scripts/min_mean_cycle.py edges.csv --max-iters 50 --verbose
"""
import argparse
import json
import logging
import sys

from cyclemean import ConfigurationError, DirectedGraph, minimum_mean_cycle


def main(argv=None):
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("csv", help="input CSV path")
    ap.add_argument("--src-col", default="src", help="source column name (default: src)")
    ap.add_argument("--dst-col", default="dst", help="dest column name (default: dst)")
    ap.add_argument("--weight-col", default="weight", help="weight column name (default: weight)")
    ap.add_argument("--max-iters", type=int, default=None,
                    help="global cap on policy iterations (default: unbounded)")
    ap.add_argument("--tol", type=float, default=None,
                    help="tolerance for potential comparisons (default: 1e-9)")
    ap.add_argument("--verbose", action="store_true", help="log every iteration")
    ap.add_argument("--json", action="store_true", help="print the full result as JSON")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(name)s] %(message)s",
    )

    graph = DirectedGraph.from_csv(args.csv, args.src_col, args.dst_col, args.weight_col)
    try:
        result = minimum_mean_cycle(
            graph,
            maximum_iterations=args.max_iters,
            tolerance_epsilon=args.tol,
        )
    except ConfigurationError as exc:
        ap.error(str(exc))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(f"graph: {graph!r}")
    print(f"trace: {result.trace.summary()}")
    if not result.has_cycle:
        print("no cycle")
        return 0
    cycle = result.cycle
    print(f"minimum cycle mean = {result.mean}")
    print(f"cycle ({cycle.length} arcs, weight {cycle.weight}): "
          + " -> ".join(str(v) for v in cycle.vertices))
    return 0


if __name__ == "__main__":
    sys.exit(main())
