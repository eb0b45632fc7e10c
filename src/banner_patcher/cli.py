"""
Transparency Banner Patcher - command line entry point.

Builds a ZIP patch that replaces semi-transparent windscreen banner textures
of Assetto Corsa cars with opaque (or alpha-stretched) versions.

Examples:
  # Process every car listed in Rules.txt, AC found through Steam:
  banner-patcher

  # Two cars, custom rules, plain (non-JSGME) archive:
  banner-patcher ks_ferrari_458 ks_audi_r8 -r my_rules.txt --no-mod -o patch.zip
"""

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from banner_patcher import __version__
from banner_patcher.core import (
    BannerPatcher,
    ConfigurationError,
    PatchArchive,
    PatchSettings,
    TextureCompressor,
    TransparencyFixer,
    build_mod_prefix,
    ensure_unique,
    find_ac_root,
    find_texconv,
    format_size,
    get_car_name,
    get_cars_directory,
    join_readable,
    load_rules,
)


DEFAULT_RULES_FILE = "Rules.txt"

DESCRIPTION_TEMPLATE = ("Replaces skin textures to make windscreen banners non-transparent "
                        "based on set of rules. Affects: {cars}.")


class _ArgumentParser(argparse.ArgumentParser):
    """Exits with code 1 on bad arguments"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _threshold(value: str) -> float:
    try:
        threshold = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid threshold: {value!r}")
    if not 0.0 <= threshold <= 1.0:
        raise argparse.ArgumentTypeError(f"threshold must be within [0, 1], got {value}")
    return threshold


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="banner-patcher",
        description="Make windscreen banner textures of AC cars non-transparent and pack them into a patch.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument('cars', nargs='*', metavar='CAR_ID',
                        help='Car IDs to process; if omitted, cars from rules are used')
    parser.add_argument('--directory', '-d', metavar='DIR',
                        help='Path to content/cars directory; if omitted, found through Steam')
    parser.add_argument('--rules', '-r', nargs='+', metavar='FILE',
                        help=f'Rules files (default: {DEFAULT_RULES_FILE})')
    parser.add_argument('--output', '-o', metavar='FILE',
                        help='Output file; if omitted, put into the current directory')
    parser.add_argument('--texconv', metavar='EXE', help='Path to texconv executable')
    parser.add_argument('--mod', '-m', action=argparse.BooleanOptionalAction, default=True,
                        help='Pack as JSGME modification')
    parser.add_argument('--gradients', action=argparse.BooleanOptionalAction, default=True,
                        help='Keep gradients by stretching alpha')
    parser.add_argument('--gradient-threshold', type=_threshold, default=0.4, metavar='T',
                        help='Threshold for gradients, 0-1 (default: 0.4)')
    parser.add_argument('--dxt1', action='store_true',
                        help='Use DXT1 compression for DDS textures by default')
    parser.add_argument('--dxt1-production-quality', dest='production_quality', action='store_true',
                        help='Use production-quality DXT1 compression; might be worse')
    parser.add_argument('--mipmaps', action=argparse.BooleanOptionalAction, default=True,
                        help='Generate mipmaps for DDS compression')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def default_output_path(car_ids: List[str]) -> Path:
    name = f"transparencyPatch_{car_ids[0]}.zip" if len(car_ids) == 1 else f"transparencyPatch_{len(car_ids)}.zip"
    return Path.cwd() / name


def run(args: argparse.Namespace) -> int:
    """Run a patching session from parsed arguments"""
    rules_files = args.rules or [DEFAULT_RULES_FILE]
    print("Rules:\n  " + "\n  ".join(rules_files))
    rules = load_rules(Path(p) for p in rules_files)

    # AC root
    if args.directory:
        cars_dir = Path(args.directory)
    else:
        cars_dir = get_cars_directory(find_ac_root())

    # List of cars to process
    car_ids = args.cars or list(rules)
    car_ids = [c for c in car_ids if (cars_dir / c).is_dir()]
    if not car_ids:
        raise ConfigurationError(f"No cars to process found in {cars_dir}")

    car_names = [get_car_name(cars_dir / c) for c in car_ids]
    description = DESCRIPTION_TEMPLATE.format(cars=join_readable(car_names))

    settings = PatchSettings.from_args(args)
    mod_prefix = build_mod_prefix(car_names) if settings.pack_as_mod else ""
    output_path = ensure_unique(Path(args.output) if args.output else default_output_path(car_ids))

    compressor = TextureCompressor(find_texconv(args.texconv), mipmaps=settings.mipmaps,
                                   production_quality=settings.production_quality)
    patcher = BannerPatcher(TransparencyFixer(settings, compressor))

    with PatchArchive(output_path, mod_prefix, comment=description) as archive:
        if settings.pack_as_mod:
            archive.write_mod_description(description)
        summary = patcher.run(car_ids, cars_dir, rules, archive)

    print("\n=== Summary ===")
    print(f"Cars processed: {len(summary.cars)}, skipped: {len(summary.failed_cars)}")
    print(f"Textures fixed: {summary.textures_fixed}, unchanged: {summary.textures_skipped}")
    print(f"Patch saved to: {output_path} ({format_size(output_path.stat().st_size)})")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    try:
        return run(args)
    except (OSError, ConfigurationError) as e:
        print(e, file=sys.stderr)
        return 2
    except Exception:
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
