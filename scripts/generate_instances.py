#!/usr/bin/env python3
import argparse
import json
from pathlib import Path

from conic_optimizer.instances import generate_random_lp, generate_random_socp


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random feasible LP or SOCP instances.")
    parser.add_argument("--kind", choices=["lp", "socp"], default="lp", help="Problem class")
    parser.add_argument("--vars", type=int, default=3, help="Number of LP variables")
    parser.add_argument("--constraints", type=int, default=3, help="Number of LP constraints or SOCP rows")
    parser.add_argument("--cones", type=int, nargs="+", default=[3], help="SOCP cone sizes")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    instances = []
    for idx in range(args.count):
        seed = (args.seed or 0) + idx
        if args.kind == "lp":
            instances.append(generate_random_lp(args.vars, args.constraints, seed))
        else:
            instances.append(generate_random_socp(args.constraints, args.cones, seed))
    payload = [instance.model_dump() for instance in instances]

    if args.out:
        Path(args.out).write_text(json.dumps(payload, indent=2))
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
