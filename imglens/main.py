"""
img-lens command-line interface.

Each filter is a subcommand reading one image and writing one image:

    imglens grayscale -i in.png -o out.png
    imglens blur gaussian -i in.png -o out.png -r 3 -s 1.5 -t auto
    imglens crop -i in.png -o out.png -s 64x64+10x20
    imglens run -i in.png -o out.png --pipeline steps.json
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Tuple

from . import __version__
from .core import ChannelFlags, ImageLensError, InvalidParameterError
from .lens import AUTO_THREADS, resolve_thread_count
from .processing import (
    canny,
    crop,
    gamma_correction,
    gaussian_blur,
    get_all_categories,
    get_filters_by_category,
    grayscale,
    kuwahara,
    mean_blur,
    negative,
    resize,
    sepia,
)
from .services import PipelineSerializer, Settings
from .services.runner import FilterRunner
from .utils.logging import get_logger, setup_logging

log = get_logger("cli")


# =============== Argument types ===============
def parse_size(text: str) -> Tuple[int, int]:
    """Parse "WIDTHxHEIGHT"."""
    parts = text.strip().lower().split("x")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise argparse.ArgumentTypeError(f"size must be in [width]x[height] format, got {text!r}")
    return int(parts[0]), int(parts[1])


def parse_size_offset(text: str) -> Tuple[int, int, int, int]:
    """Parse "WIDTHxHEIGHT+OFFSET_XxOFFSET_Y" into (w, h, x, y)."""
    parts = text.split("+")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(
            "size with offset must be in [width]x[height]+[offset_x]x[offset_y] format"
        )
    width, height = parse_size(parts[0])
    offset_x, offset_y = parse_size(parts[1])
    return width, height, offset_x, offset_y


def parse_threads(text: str):
    """ "auto" or a positive integer."""
    try:
        resolve_thread_count(text)
    except InvalidParameterError as e:
        raise argparse.ArgumentTypeError(str(e))
    text = text.strip().lower()
    return AUTO_THREADS if text == AUTO_THREADS else int(text)


def parse_channels(text: str) -> ChannelFlags:
    try:
        return ChannelFlags.parse(text)
    except InvalidParameterError as e:
        raise argparse.ArgumentTypeError(str(e))


# =============== Parser ===============
def _add_io(p: argparse.ArgumentParser, settings: Settings, channels: bool = True) -> None:
    p.add_argument("-i", "--input", required=True, help="Input image file.")
    p.add_argument("-o", "--output", required=True, help="Output image file (always RGBA8).")
    p.add_argument(
        "-t", "--threads", type=parse_threads, default=settings.get_threads(),
        help="Worker threads: 'auto' or a positive integer (default from settings).",
    )
    if channels:
        p.add_argument(
            "-c", "--channels", type=parse_channels, default=settings.get_channels(),
            help="Channels to write, any of R, G, B, A (default RGB).",
        )


def build_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    settings = settings or Settings()

    p = argparse.ArgumentParser(prog="imglens", description="Lens-based image filters.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv).")
    p.add_argument("--config", default=None, help="Settings INI file (default: ./imglens.ini).")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = p.add_subparsers(dest="cmd", required=True)

    lp = sub.add_parser("list", help="List filters and their parameters.")
    lp.set_defaults(func=cmd_list)

    for name, func, help_text in (
        ("grayscale", cmd_grayscale, "Luma-weighted grayscale."),
        ("sepia", cmd_sepia, "Sepia tone."),
        ("negative", cmd_negative, "Invert channel values."),
    ):
        cp = sub.add_parser(name, help=help_text)
        _add_io(cp, settings)
        cp.set_defaults(func=func)

    gp = sub.add_parser("gamma", aliases=["gamma-correction"], help="Gamma correction.")
    _add_io(gp, settings)
    gp.add_argument("-g", "--gamma", type=float, required=True, help="Gamma value (> 0).")
    gp.set_defaults(func=cmd_gamma)

    bp = sub.add_parser("blur", help="Convolution blur.")
    blur_sub = bp.add_subparsers(dest="kind", required=True)

    mp = blur_sub.add_parser("mean", help="Mean (box) blur.")
    _add_io(mp, settings)
    mp.add_argument("-r", "--radius", type=int, default=settings.get_blur_radius(), help="Kernel radius.")
    mp.set_defaults(func=cmd_mean_blur)

    gbp = blur_sub.add_parser("gaussian", help="Gaussian blur.")
    _add_io(gbp, settings)
    gbp.add_argument("-r", "--radius", type=int, default=settings.get_blur_radius(), help="Kernel radius.")
    gbp.add_argument("-s", "--sigma", type=float, default=settings.get_gaussian_sigma(), help="Sigma value.")
    gbp.set_defaults(func=cmd_gaussian_blur)

    kp = sub.add_parser("kuwahara", help="Edge-preserving Kuwahara filter.")
    _add_io(kp, settings)
    kp.add_argument("-r", "--radius", type=int, default=settings.get_kuwahara_radius(), help="Window radius.")
    kp.set_defaults(func=cmd_kuwahara)

    low, high = settings.get_canny_thresholds()
    ep = sub.add_parser("canny", help="Canny edge detection.")
    _add_io(ep, settings, channels=False)
    ep.add_argument("-r", "--radius", type=int, default=settings.get_canny_radius(), help="Smoothing radius.")
    ep.add_argument("-s", "--sigma", type=float, default=settings.get_canny_sigma(), help="Smoothing sigma.")
    ep.add_argument("--low", type=float, default=low, help="Weak edge threshold.")
    ep.add_argument("--high", type=float, default=high, help="Strong edge threshold.")
    ep.set_defaults(func=cmd_canny)

    crp = sub.add_parser("crop", help="Copy a rectangular region.")
    _add_io(crp, settings, channels=False)
    crp.add_argument(
        "-s", "--size", type=parse_size_offset, required=True,
        help="Region as [width]x[height]+[offset_x]x[offset_y].",
    )
    crp.set_defaults(func=cmd_crop)

    rsp = sub.add_parser("resize", help="Nearest-neighbor resize.")
    _add_io(rsp, settings, channels=False)
    rsp.add_argument("-s", "--size", type=parse_size, required=True, help="Target size as [width]x[height].")
    rsp.set_defaults(func=cmd_resize)

    rp = sub.add_parser("run", help="Run a pipeline of filters from a JSON file.")
    _add_io(rp, settings, channels=False)
    rp.add_argument("--pipeline", required=True, help="Pipeline JSON file.")
    rp.set_defaults(func=cmd_run)

    return p


# =============== Commands ===============
def _runner(args: argparse.Namespace) -> FilterRunner:
    return FilterRunner(args.threads)


def cmd_list(_args: argparse.Namespace) -> int:
    for category in get_all_categories():
        print(f"{category}:")
        for f in get_filters_by_category(category):
            params = ", ".join(f"{name}={p.value!r}" for name, p in f.parameters.items())
            print(f"  {f.filter_id:<18} {f.name}" + (f" ({params})" if params else ""))
    return 0


def cmd_grayscale(args: argparse.Namespace) -> int:
    _runner(args).run_operation(
        args.input, args.output, lambda img, m: grayscale(img, args.channels, m), "grayscale"
    )
    return 0


def cmd_sepia(args: argparse.Namespace) -> int:
    _runner(args).run_operation(
        args.input, args.output, lambda img, m: sepia(img, args.channels, m), "sepia"
    )
    return 0


def cmd_negative(args: argparse.Namespace) -> int:
    _runner(args).run_operation(
        args.input, args.output, lambda img, m: negative(img, args.channels, m), "negative"
    )
    return 0


def cmd_gamma(args: argparse.Namespace) -> int:
    _runner(args).run_operation(
        args.input,
        args.output,
        lambda img, m: gamma_correction(img, args.gamma, args.channels, m),
        "gamma correction",
    )
    return 0


def cmd_mean_blur(args: argparse.Namespace) -> int:
    _runner(args).run_operation(
        args.input,
        args.output,
        lambda img, m: mean_blur(img, args.radius, args.channels, m),
        "mean blur",
    )
    return 0


def cmd_gaussian_blur(args: argparse.Namespace) -> int:
    _runner(args).run_operation(
        args.input,
        args.output,
        lambda img, m: gaussian_blur(img, args.radius, args.sigma, args.channels, m),
        "gaussian blur",
    )
    return 0


def cmd_kuwahara(args: argparse.Namespace) -> int:
    _runner(args).run_operation(
        args.input,
        args.output,
        lambda img, m: kuwahara(img, args.radius, args.channels, m),
        "kuwahara",
    )
    return 0


def cmd_canny(args: argparse.Namespace) -> int:
    _runner(args).run_operation(
        args.input,
        args.output,
        lambda img, m: canny(img, args.radius, args.sigma, args.low, args.high, m),
        "canny",
    )
    return 0


def cmd_crop(args: argparse.Namespace) -> int:
    width, height, offset_x, offset_y = args.size
    _runner(args).run_operation(
        args.input,
        args.output,
        lambda img, m: crop(img, width, height, offset_x, offset_y, m),
        "crop",
    )
    return 0


def cmd_resize(args: argparse.Namespace) -> int:
    width, height = args.size
    _runner(args).run_operation(
        args.input,
        args.output,
        lambda img, m: resize(img, width, height, m),
        "resize",
    )
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    pipeline = PipelineSerializer.load_from_file(args.pipeline)
    _runner(args).run_pipeline(args.input, args.output, pipeline)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    # --config and -v must be known before the parser is built; settings supply defaults
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("--config", default=None)
    known, _ = pre.parse_known_args(argv)

    settings = Settings(known.config)
    setup_logging(known.verbose, settings.get_log_level())

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    try:
        return args.func(args)
    except (ImageLensError, ValueError, OSError) as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
