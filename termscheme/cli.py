from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Sequence

from .color import Color
from .config import Backend, PaletteConfig
from .errors import PaletteError
from .palette import generate_from_path

ANSI_RESET = '\033[0m'


def validate_color_delta(text: str) -> float:
    """argparse type: a float within [-1.0, 1.0]."""
    try:
        num = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'`{text}` is not a valid floating point number') from None
    if not -1.0 <= num <= 1.0:
        raise argparse.ArgumentTypeError(f'{num} is not in range [-1.0,1.0]')
    return num


def positive_int(text: str) -> int:
    try:
        num = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'`{text}` is not a valid integer') from None
    if num < 1:
        raise argparse.ArgumentTypeError(f'{num} must be at least 1')
    return num


def paint(color: Color, text: str) -> str:
    """Wrap ``text`` in 24-bit ANSI codes: ``color`` background, legible foreground."""
    fr, fg, fb = color.text_color().rgb
    br, bg, bb = color.rgb
    return f'\033[38;2;{fr};{fg};{fb}m\033[48;2;{br};{bg};{bb}m{text}{ANSI_RESET}'


def format_color(color: Color, *, colorize: bool = False, names: bool = False) -> str:
    text = color.to_hex(uppercase=True)
    if colorize:
        text = paint(color, text)
    if names:
        text = f'{text} {color.closest_name()}'
    return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='termscheme',
        description='Generate a terminal color scheme from an image',
    )
    parser.add_argument('image', help='Path to image to pick colors from')
    parser.add_argument('-c', '--colors', type=positive_int, default=8,
        help='Number of colors to generate, excluding bold colors (default: 8)')
    parser.add_argument('--backend', choices=[b.value for b in Backend], default=Backend.MEDIAN_CUT.value,
        help='Quantization backend (default: median-cut)')
    parser.add_argument('-b', '--no-bold', action='store_true',
        help='Skip generating bold color variants')
    parser.add_argument('--bold-delta', type=validate_color_delta, default=0.2, metavar='DELTA',
        help='How much lighter bold colors are, in [-1.0, 1.0] (default: 0.2)')
    parser.add_argument('--rotate', type=float, default=0.0, metavar='DEGREES',
        help='Rotate every hue by this many degrees (default: 0)')
    parser.add_argument('--lighten', type=validate_color_delta, default=0.0, metavar='DELTA',
        help='Lighten (or darken, if negative) every color, in [-1.0, 1.0]')
    parser.add_argument('--saturate', type=validate_color_delta, default=0.0, metavar='DELTA',
        help='Saturate (or desaturate, if negative) every color, in [-1.0, 1.0]')
    parser.add_argument('-l', '--light', action='store_true',
        help='Generate a light theme (reverses the color order)')
    parser.add_argument('--no-adjust', action='store_true',
        help='Do not push the darkest and lightest colors toward black and white')
    parser.add_argument('--names', action='store_true',
        help='Print the closest CSS3 color name next to each color')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output to stderr')
    return parser


def config_from_args(args: argparse.Namespace) -> PaletteConfig:
    return PaletteConfig(
        colors=args.colors,
        backend=Backend(args.backend),
        bold=not args.no_bold,
        bold_delta=args.bold_delta,
        rotate=args.rotate,
        lighten=args.lighten,
        saturate=args.saturate,
        light=args.light,
        anchor=not args.no_adjust,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if not os.path.isfile(args.image):
        print('Image not found.', file=sys.stderr)
        return 1

    try:
        config = config_from_args(args)
        colors = generate_from_path(args.image, config)
    except PaletteError as exc:
        print(f'Error: {exc}', file=sys.stderr)
        return 1

    # Plain text when piped
    colorize = sys.stdout.isatty()
    for color in colors:
        print(format_color(color, colorize=colorize, names=args.names))
    return 0


if __name__ == '__main__':
    sys.exit(main())
