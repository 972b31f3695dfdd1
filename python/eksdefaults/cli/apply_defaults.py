#!/usr/bin/env python3
"""
eksdefaults/cli/apply_defaults.py

Reads a cluster config YAML file, fills in every unset value (including
kubelet reservations looked up from EC2), and writes the result as YAML.

Usage example:
  python -m eksdefaults.cli.apply_defaults \
      --config-file cluster.yaml \
      --region us-west-2 \
      --output cluster.defaulted.yaml

Without --output the defaulted config is printed to stdout.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, NoReturn, Optional

from eksdefaults.defaults import set_config_defaults, set_default_fargate_profile
from eksdefaults.models.cluster import ClusterConfig
from eksdefaults.utils.instance_types import (
    EC2InstanceTypeInfoProvider,
    InstanceTypeInfoProvider,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eksdefaults",
        description="Apply default values to an EKS cluster config file.",
    )
    parser.add_argument(
        "--config-file",
        required=True,
        help="Path to the cluster config YAML.",
    )
    parser.add_argument(
        "--region",
        default=None,
        help="Override metadata.region (default: value in the file, then $REGION).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the defaulted YAML here instead of stdout.",
    )
    parser.add_argument(
        "--default-fargate-profile",
        action="store_true",
        default=False,
        help="Replace Fargate profiles with 'fp-default' (default + kube-system).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Log each default as it is applied.",
    )
    return parser


def apply_defaults(
    args: argparse.Namespace, provider: Optional[InstanceTypeInfoProvider] = None
) -> str:
    """
    Load, default and serialize the config named by `args`.

    Returns:
        The defaulted config as YAML.

    Raises:
        ValueError: The config file is missing or invalid.
        ReservationError: Reservations for a node group could not be computed.
    """
    if not os.path.isfile(args.config_file):
        raise ValueError(f"Config file not found: {args.config_file}")

    with open(args.config_file, "r", encoding="utf-8") as f:
        cfg = ClusterConfig.from_yaml(f.read())

    if args.region:
        cfg.metadata.region = args.region
    if args.default_fargate_profile:
        set_default_fargate_profile(cfg)

    set_config_defaults(
        cfg, provider if provider is not None else EC2InstanceTypeInfoProvider()
    )
    return cfg.to_yaml()


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """
    Entry point for the 'eksdefaults' console script.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        rendered = apply_defaults(args)
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(rendered)
            print(f"Defaulted config written to {args.output}")
        else:
            print(rendered, end="")
    except Exception as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    else:
        sys.exit(0)


if __name__ == "__main__":
    main()
