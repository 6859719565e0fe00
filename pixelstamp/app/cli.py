from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from ..build import FAILED, AssetManifest, BuildSettings, StampBuilder
from ..codec.types import Color
from ..codegen import EMITTERS, load_stamp
from ..errors import PixelStampError
from ..stamp import Stamp

RESOURCE_EXTENSION = ".pxs"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pixelstamp",
        description="Pixelstamp: pack black/white images into 1-bit constants for embedding.",
    )
    parser.add_argument("--list-formats", action="store_true", help="List output formats and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress and debug details")
    commands = parser.add_subparsers(dest="command")

    convert = commands.add_parser("convert", help="Convert a single image")
    convert.add_argument("path", help="Image to convert (.png/.bmp/.gif/...)")
    convert.add_argument("-f", "--format", default="c", choices=sorted(EMITTERS), help="Output format (default: c)")
    convert.add_argument("-o", "--output", metavar="PATH", help="Output file (default: stdout)")
    convert.add_argument("--name", metavar="SYMBOL", help="Constant name (default: derived from the file name)")

    build = commands.add_parser("build", help="Convert every asset listed in a JSON manifest")
    build.add_argument("manifest", help="Path to the manifest file")
    build.add_argument("--force", action="store_true", help="Rebuild assets even if their content is unchanged")
    build.add_argument("-j", "--jobs", type=int, help="Number of assets to convert in parallel")

    show = commands.add_parser("show", help="Print an ASCII preview of an image or .pxs resource")
    show.add_argument("path", help="Image or resource file")
    show.add_argument("--on", default="#", help="Character for white pixels (default: #)")
    show.add_argument("--off", default=".", help="Character for black pixels (default: .)")
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def list_formats() -> int:
    for name in sorted(EMITTERS):
        print(name)
    return 0


def convert_image(args: argparse.Namespace) -> int:
    settings = BuildSettings(format=args.format, name=args.name)
    data = StampBuilder(settings).render(args.path)
    if args.output:
        with open(args.output, "wb") as handle:
            handle.write(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
    return 0


def build_manifest(args: argparse.Namespace) -> int:
    manifest = AssetManifest.load(args.manifest)
    builder = StampBuilder(BuildSettings(force=args.force, jobs=args.jobs))
    if args.jobs == 1:
        results = builder.build_manifest(manifest)
    else:
        results = asyncio.run(builder.build_manifest_async(manifest))
    failed = 0
    for result in results:
        if result.status == FAILED:
            failed += 1
            print(f"{result.asset.source}: {result.error}", file=sys.stderr)
        else:
            print(f"{result.status:>6} {result.asset.output}")
    return 2 if failed else 0


def open_stamp(path: str) -> Stamp:
    if os.path.splitext(path)[1].lower() == RESOURCE_EXTENSION:
        return load_stamp(path)
    return Stamp.from_bitmap(StampBuilder().build_from_file(path))


def render_ascii(stamp: Stamp, on: str = "#", off: str = ".") -> str:
    lines = []
    row: List[str] = []
    for x, _y, color in stamp.pixels():
        row.append(on if color is Color.WHITE else off)
        if x == stamp.width - 1:
            lines.append("".join(row))
            row = []
    return "\n".join(lines)


def show_stamp(args: argparse.Namespace) -> int:
    stamp = open_stamp(args.path)
    print(f"{stamp.width}x{stamp.height}")
    preview = render_ascii(stamp, args.on, args.off)
    if preview:
        print(preview)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    if args.list_formats:
        return list_formats()
    if not args.command:
        print("Missing command. Use --help for usage.", file=sys.stderr)
        return 2
    try:
        if args.command == "convert":
            return convert_image(args)
        if args.command == "build":
            return build_manifest(args)
        return show_stamp(args)
    except (PixelStampError, OSError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
