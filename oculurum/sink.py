"""PNG output built on pypng's row-streaming writer.

Scanlines are handed to `png.Writer.write` lazily, so the image is never
held in memory as a whole.
"""
import png

from .errors import SinkInitError, SinkWriteError
from .modes import ColorMode, CompressionLevel, describe

# (greyscale, alpha) per color mode; bitwise pixels are 8-bit grey 0x00/0xFF
_LAYOUTS = {
    ColorMode.BITWISE: (True, False),
    ColorMode.GRAYSCALE: (True, False),
    ColorMode.RGB: (False, False),
    ColorMode.GRAYSCALE_ALPHA: (True, True),
    ColorMode.RGBA: (False, True),
}

# zlib levels; None keeps zlib's default
_ZLIB_LEVELS = {
    CompressionLevel.DEFAULT: None,
    CompressionLevel.FAST: 1,
    CompressionLevel.BEST: 9,
    CompressionLevel.HUFFMAN: 1,
    CompressionLevel.RLE: 1,
}


def _scanlines(chunks, stride):
    buf = bytearray()
    for chunk in chunks:
        buf.extend(chunk)
        while len(buf) >= stride:
            yield bytes(buf[:stride])
            del buf[:stride]
    if buf:
        # short last row, png.Writer rejects it
        yield bytes(buf)


class PngSink:
    def __init__(self, width, height, mode, compression=CompressionLevel.DEFAULT):
        if width < 1 or height < 1:
            raise SinkInitError(f"Invalid image size {width}x{height}", exit_code=6)
        if mode not in _LAYOUTS:
            raise SinkInitError(f"Unsupported color type {mode!r}", exit_code=6)

        greyscale, alpha = _LAYOUTS[mode]
        try:
            self._writer = png.Writer(
                width,
                height,
                greyscale=greyscale,
                alpha=alpha,
                bitdepth=8,
                compression=_ZLIB_LEVELS.get(compression),
            )
        except (png.ProtocolError, ValueError) as exc:
            raise SinkInitError(f"Failed initialising PNG writer: {exc}", exit_code=6) from exc

        self.width = width
        self.height = height
        self.mode = mode
        self.stride = width * describe(mode).bytes_per_pixel
        self._outfile = None

    def attach(self, outfile):
        """Bind the binary stream the PNG is written to."""
        try:
            writable = outfile.writable()
        except (AttributeError, ValueError) as exc:
            raise SinkInitError(f"Failed initialising PNG stream: {exc}", exit_code=7) from exc
        if not writable:
            raise SinkInitError("Failed initialising PNG stream: output is not writable",
                                exit_code=7)
        self._outfile = outfile
        return self

    def write(self, chunks):
        """Encode the whole pixel stream `chunks`; returns the scanline count."""
        if self._outfile is None:
            raise SinkInitError("PNG stream used before an output was attached", exit_code=7)
        try:
            return self._writer.write(self._outfile, _scanlines(chunks, self.stride))
        except (OSError, png.ProtocolError) as exc:
            raise SinkWriteError(f"Writing PNG data failed: {exc}") from exc

    def finalize(self):
        try:
            self._outfile.flush()
        except OSError as exc:
            raise SinkWriteError(f"Finalizing PNG failed: {exc}") from exc
