"""Color modes and compression levels, and what each one implies for sizing."""
from enum import Enum
from typing import NamedTuple


class ColorMode(Enum):
    # values are the CLI codes; 3 (indexed) is reserved and not implemented
    BITWISE = 0
    GRAYSCALE = 1
    RGB = 2
    GRAYSCALE_ALPHA = 4
    RGBA = 5


class CompressionLevel(Enum):
    DEFAULT = 0
    FAST = 1
    BEST = 2
    HUFFMAN = 3  # deprecated
    RLE = 4  # deprecated


DEPRECATED_COMPRESSION = (CompressionLevel.HUFFMAN, CompressionLevel.RLE)


class ModeDescriptor(NamedTuple):
    bytes_per_pixel: int
    multiplier: float


# multiplier = roughly how many output pixels one input byte should occupy
_DESCRIPTORS = {
    ColorMode.BITWISE: ModeDescriptor(1, 8.0),
    ColorMode.GRAYSCALE: ModeDescriptor(1, 1.0),
    ColorMode.RGB: ModeDescriptor(3, 0.3),
    ColorMode.GRAYSCALE_ALPHA: ModeDescriptor(2, 0.5),
    ColorMode.RGBA: ModeDescriptor(4, 0.25),
}


def describe(mode):
    """Return bytes per pixel and size multiplier for `mode`.

    Anything that is not a known color mode is treated as grayscale.
    """
    return _DESCRIPTORS.get(mode, _DESCRIPTORS[ColorMode.GRAYSCALE])


def _parse_code(text, enum_cls, name):
    try:
        code = int(str(text).strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {text!r}") from None
    try:
        return enum_cls(code)
    except ValueError:
        raise ValueError(f"unknown {name} {code}") from None


def parse_color_mode(text):
    return _parse_code(text, ColorMode, "color type")


def parse_compression(text):
    return _parse_code(text, CompressionLevel, "compression level")
