#!/usr/bin/env python3
"""
Export the map layers for one track as JSON.

Reads a local .gpx/.fit file or downloads one over HTTP, runs the derivation
pipeline and writes the scene (path, heart-rate segments, endpoints, optional
wall, bounds, profile, summary).

Usage examples:
  - Plain track to stdout:
      python scripts/export_scene.py tracks/cycling.gpx
  - Paragliding track with the wall projection, written to a file:
      python scripts/export_scene.py tracks/paragliding.gpx --wall --out paragliding.json
  - Remote file:
      python scripts/export_scene.py https://example.com/ride.gpx --stride 4
"""

from __future__ import annotations

import argparse
import logging
import sys

from trackscene.core.errors import TrackError
from trackscene.core.loaders import fetch_track, load_track
from trackscene.core.scene import build_scene
from trackscene.schemas.track import RenderMode


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Export track map layers as JSON")
    ap.add_argument("source", help="Path or http(s) URL of a .gpx/.fit file")
    ap.add_argument("--wall", action="store_true", help="Include the wall projection ribbon")
    ap.add_argument("--stride", type=int, default=None, help="Vertex stride for heart-rate segments")
    ap.add_argument("--wall-height", type=float, default=None, help="Wall height in meters")
    ap.add_argument("--out", default=None, help="Output file (default: stdout)")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    try:
        if args.source.startswith(("http://", "https://")):
            track = fetch_track(args.source)
        else:
            track = load_track(args.source)
        scene = build_scene(
            track,
            RenderMode.wall_projection if args.wall else RenderMode.simple,
            stride=args.stride,
            wall_height=args.wall_height,
        )
    except (OSError, TrackError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    payload = scene.model_dump_json(indent=2)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(payload)
        print(f"Wrote {args.out}")
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
