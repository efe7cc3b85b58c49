"""CLI entry point for synthetic telemetry generators.

Usage:
    python -m generators telemetry --seed 42 --count 100
    python -m generators telemetry --profile impostor --count 20 --output file
    python -m generators telemetry --config generators/configs/default_telemetry.yaml
"""

import argparse
import json
import sys
from pathlib import Path

import yaml


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Behavioral fraud guard telemetry generators")
    parser.add_argument(
        "generator",
        choices=["telemetry"],
        help="Which generator to run",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--count", type=int, default=100, help="Number of sessions to generate")
    parser.add_argument(
        "--profile",
        type=str,
        default="genuine",
        choices=["genuine", "impostor"],
        help="Typist profile to simulate",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="stdout",
        choices=["stdout", "file"],
        help="Output destination",
    )
    parser.add_argument("--output-file", type=str, default=None, help="Output file path")

    args = parser.parse_args(argv)

    config: dict = {}
    if args.config:
        with open(args.config) as f:
            config = yaml.safe_load(f) or {}

    from .telemetry_generator import TelemetryGenerator

    gen = TelemetryGenerator(config=config, seed=args.seed)
    events = gen.generate(num_sessions=args.count, profile=args.profile)

    if args.output == "stdout":
        for event in events:
            print(json.dumps(event, default=str))
    else:
        output_path = args.output_file or f"output/{args.generator}_{args.profile}_events.jsonl"
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            for event in events:
                f.write(json.dumps(event, default=str) + "\n")
        print(f"Wrote {len(events)} events to {output_path}", file=sys.stderr)

    print(f"Generated {len(events)} events", file=sys.stderr)
