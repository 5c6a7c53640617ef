#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Render an affinity cloud from an exported JSON file, without the server.

The file holds the same body the /api/cloud route takes:
    {"affinities": [...], "contacts": [...]}

Run:
    python render_cloud.py export.json --count 25 --labels
"""

import argparse
import json
import logging
import random
import sys

from affinities.cloud import AffinityCloud, NoAffinitiesError
from affinities.constants import DEFAULT_COUNT, SAVE_DIR
from affinities.logging_config import setup_logging
from affinities.request_models import CloudRequest
from affinities.scoring import rank_affinities

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Render user affinities as an avatar cloud.")
    parser.add_argument("export", help="JSON file with affinities and contacts")
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT, help="how many users to show")
    parser.add_argument("--v1", action="store_true", help="use the v1 affinity scores as-is")
    parser.add_argument("--labels", action="store_true", help="draw names and shares under avatars")
    parser.add_argument("--seed", type=int, default=None, help="seed for a repeatable layout")
    parser.add_argument("--out-dir", default=SAVE_DIR)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    with open(args.export, "r", encoding="utf-8") as f:
        data = json.load(f)
    request = CloudRequest(**{**data, "count": args.count, "algorithm": "v1" if args.v1 else "v2",
                              "show_labels": args.labels, "seed": args.seed})

    items = rank_affinities(request.affinities, request.contacts,
                            use_v1=request.algorithm == "v1", count=request.count)
    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        cloud = AffinityCloud(items, show_labels=request.show_labels, rng=rng)
    except NoAffinitiesError as e:
        print(e)
        return 1

    png_path, json_path = cloud.save_cloud(args.out_dir)
    print(f"Wrote {png_path} and {json_path}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
