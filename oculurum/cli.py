import os
import re
import sys

from . import report
from .compositor import run
from .errors import OculurumError, OutputPathError, UsageError
from .modes import (
    DEPRECATED_COMPRESSION,
    ColorMode,
    CompressionLevel,
    parse_color_mode,
    parse_compression,
)
from .planner import plan_transcode
from .sink import PngSink

# CONFIG
DEFAULT_OUTPUT = "oculurised.png"

HELP = """\
Usage: oculurum [options] <file or directory>

Options:
        -h | --help
            Prints this help message.

        -c | --compression <value>
            The PNG compression level.
            Values:
                0 => Default
                1 => Fast
                2 => Best
            Deprecated Values:
                3 => Huffman
                4 => Rle

        -t | --type <value>
            The PNG colour type.
            Values:
                0 => Bitwise
                1 => Grayscale (Default)
                2 => RGB
                4 => Grayscale Alpha
                5 => RGB Alpha
            Unimplemented:
                3 => Indexed
"""


_COMPRESSION_FLAGS = ("-c", "--compression")
_TYPE_FLAGS = ("-t", "--type")


def parse_args(argv):
    """Return (input path, color mode, compression) or None when help was asked for.

    Arguments are handled strictly in order, so `-h` wins over anything after
    it and an option always takes the next argument as its value. Bad option
    values fall back to their defaults with a warning; structural problems
    raise UsageError.
    """
    compression = CompressionLevel.DEFAULT
    mode = ColorMode.GRAYSCALE
    input_path = None

    i = 0
    while i < len(argv):
        arg = argv[i]
        i += 1

        if arg in ("-h", "--help"):
            return None

        if arg in _COMPRESSION_FLAGS or arg in _TYPE_FLAGS:
            if i >= len(argv):
                raise UsageError(f"Missing value for `{arg}`.", exit_code=1)
            value = argv[i]
            i += 1
            if arg in _COMPRESSION_FLAGS:
                try:
                    compression = parse_compression(value)
                except ValueError:
                    compression = CompressionLevel.DEFAULT
                    report.warn(f"Invalid argument to `{arg}`. Using default.")
                else:
                    if compression in DEPRECATED_COMPRESSION:
                        report.warn(f"Compression {compression.name} is deprecated, "
                                    f"it behaves like FAST.")
            else:
                try:
                    mode = parse_color_mode(value)
                except ValueError:
                    mode = ColorMode.GRAYSCALE
                    report.warn(f"Invalid argument to `{arg}`. Using default.")
        elif arg.startswith("-"):
            raise UsageError(f"Unknown option `{arg}`.", exit_code=1)
        elif input_path is not None:
            raise UsageError("Multiple input files.", exit_code=2)
        else:
            input_path = arg

    if not input_path:
        raise UsageError("No input file given.", exit_code=3)
    return input_path, mode, compression


def output_path_for(input_path):
    """Name the PNG after the last component of `input_path`."""
    name = re.split(r"[/\\]", input_path.rstrip("/\\"))[-1]
    if name in (".", ".."):
        name = os.path.basename(os.path.abspath(input_path))
    if not name:
        return DEFAULT_OUTPUT

    output = name + ".png"
    if "\0" in output:
        raise OutputPathError("Output path couldn't be validated (invalid characters)")
    try:
        os.fsencode(output)
    except UnicodeError as exc:
        raise OutputPathError("Output path couldn't be validated (invalid characters)") from exc
    return output


def convert(input_path, mode, compression, progress=True):
    plan = plan_transcode(input_path, mode, compression)
    report.info(f"{plan.total_bytes} bytes in {len(plan.files)} file(s), "
                f"image {plan.dimension}x{plan.dimension} {mode.name}")

    output = output_path_for(input_path)
    try:
        outfile = open(output, "wb")
    except OSError as exc:
        raise OutputPathError(f"Output file couldn't be created with error: {exc}",
                              exit_code=4) from exc

    try:
        with outfile:
            sink = PngSink(plan.dimension, plan.dimension, plan.mode, plan.compression)
            sink.attach(outfile)
            run(plan, sink, progress=progress)
    except OculurumError:
        # drop the partial PNG
        try:
            os.remove(output)
        except OSError as exc:
            report.warn(f"Couldn't remove partial output {output}: {exc}")
        raise
    return output


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    try:
        parsed = parse_args(argv)
    except UsageError as exc:
        report.error(exc)
        if exc.exit_code != 2:
            print(HELP)
        return exc.exit_code

    if parsed is None:
        print(HELP)
        return 0

    input_path, mode, compression = parsed
    try:
        output = convert(input_path, mode, compression, progress=sys.stderr.isatty())
    except OculurumError as exc:
        report.error(exc)
        return exc.exit_code

    report.success(f"Image saved: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
