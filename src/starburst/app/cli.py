import argparse
import os
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from starburst.app.build import run
from starburst.domain.errors import StarburstError


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Plan a starburst: the largest set of nodes linkable to one target, "
        "neutralizing opposing nodes greedily until the link count is reached"
    )
    ap.add_argument("--config", help="JSON or YAML plan config; flags below override it")
    ap.add_argument("--input", dest="input_path", help="Map dump JSON (Portals/Links)")
    ap.add_argument("--output", dest="output_path", help="Draw-tools JSON to write")
    ap.add_argument("--target", dest="target_guid", help="Guid of the target node")
    ap.add_argument("--target-links", dest="target_links", type=int)
    ap.add_argument(
        "--max-distance-km",
        type=float,
        help="Radius around the target to keep; 0 disables the filter",
    )
    ap.add_argument(
        "--opposing-team", dest="opposing_team", help='Team tag of blockers (default "E")'
    )
    ap.add_argument("--workers", type=int, help="Scan threads; 1 runs inline")
    ap.add_argument("--selector", choices=["scan", "incremental"])
    ap.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def load_config_file(path: str) -> dict:
    # YAML is a superset of JSON
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config {path!r} must be a mapping")
    return data


def merge_args(base: dict, args: argparse.Namespace) -> dict:
    cfg = dict(base)
    for key in ("input_path", "output_path", "target_guid", "target_links", "opposing_team"):
        value = getattr(args, key)
        if value is not None:
            cfg[key] = value
    if args.max_distance_km is not None:
        km = args.max_distance_km if args.max_distance_km > 0 else None
        cfg["filter"] = {**cfg.get("filter", {}), "max_distance_km": km}
    if args.workers is not None:
        cfg["builder"] = {**cfg.get("builder", {}), "workers": args.workers}
    if args.selector is not None:
        cfg["selector"] = {"kind": args.selector}
    if args.log_level is not None:
        cfg["log"] = {**cfg.get("log", {}), "level": args.log_level}
    return cfg


def run_cli(cfg: dict) -> int:
    input_path = cfg.get("input_path")
    if input_path and not os.path.exists(os.path.expanduser(input_path)):
        print(f"ERROR: input not found: {input_path}", file=sys.stderr)
        return 1
    try:
        plan, out = run(cfg)
    except KeyboardInterrupt:
        print("\n[cli] Interrupted.", file=sys.stderr)
        return 130  # 128 + SIGINT
    except (StarburstError, ValidationError, ValueError, OSError) as e:
        print(f"[cli] {type(e).__name__}: {e}", file=sys.stderr)
        return 2

    status = "met" if plan.target_met else "not met"
    print(
        f"{len(plan.linkable)} linkable node(s) after {plan.iterations} neutralization(s), "
        f"target {plan.target_count} {status}"
    )
    print(f"Output written to {Path(out)}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        base = load_config_file(args.config) if args.config else {}
    except (OSError, yaml.YAMLError, ValueError) as e:
        print(f"ERROR: cannot read config: {e}", file=sys.stderr)
        return 2
    return run_cli(merge_args(base, args))
