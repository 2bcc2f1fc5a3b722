import io

import pytest
from PIL import Image

from oculurum.errors import SinkInitError, SinkWriteError
from oculurum.modes import ColorMode, CompressionLevel
from oculurum.sink import PngSink


def _encode(width, height, mode, data, compression=CompressionLevel.DEFAULT, chunks=None):
    out = io.BytesIO()
    sink = PngSink(width, height, mode, compression).attach(out)
    rows = sink.write(chunks if chunks is not None else [data])
    sink.finalize()
    assert rows == height
    out.seek(0)
    return Image.open(out)


@pytest.mark.parametrize("mode, pil_mode, bpp", [
    (ColorMode.BITWISE, "L", 1),
    (ColorMode.GRAYSCALE, "L", 1),
    (ColorMode.RGB, "RGB", 3),
    (ColorMode.GRAYSCALE_ALPHA, "LA", 2),
    (ColorMode.RGBA, "RGBA", 4),
])
def test_png_layout_per_mode(mode, pil_mode, bpp):
    data = bytes(i % 256 for i in range(3 * 3 * bpp))
    with _encode(3, 3, mode, data) as img:
        assert img.format == "PNG"
        assert img.mode == pil_mode
        assert img.size == (3, 3)
        assert img.tobytes() == data


@pytest.mark.parametrize("compression", list(CompressionLevel))
def test_every_compression_level_decodes(compression):
    data = bytes(range(256)) * 4
    with _encode(32, 32, ColorMode.GRAYSCALE, data, compression) as img:
        assert img.tobytes() == data


def test_chunks_need_not_align_with_rows():
    data = bytes(range(5 * 4 * 3))
    chunks = [data[:7], data[7:8], data[8:31], data[31:]]
    with _encode(5, 4, ColorMode.RGB, None, chunks=chunks) as img:
        assert img.tobytes() == data


@pytest.mark.parametrize("width, height", [(0, 5), (5, 0), (0, 0)])
def test_rejects_empty_image(width, height):
    with pytest.raises(SinkInitError) as excinfo:
        PngSink(width, height, ColorMode.GRAYSCALE)
    assert excinfo.value.exit_code == 6


def test_rejects_unknown_mode():
    with pytest.raises(SinkInitError) as excinfo:
        PngSink(2, 2, "indexed")
    assert excinfo.value.exit_code == 6


def test_rejects_closed_stream(tmp_path):
    f = open(tmp_path / "out.png", "wb")
    f.close()
    with pytest.raises(SinkInitError) as excinfo:
        PngSink(2, 2, ColorMode.GRAYSCALE).attach(f)
    assert excinfo.value.exit_code == 7


def test_rejects_read_only_stream(tmp_path):
    path = tmp_path / "out.png"
    path.write_bytes(b"")
    with open(path, "rb") as f:
        with pytest.raises(SinkInitError) as excinfo:
            PngSink(2, 2, ColorMode.GRAYSCALE).attach(f)
    assert excinfo.value.exit_code == 7


def test_short_stream_is_a_write_error():
    sink = PngSink(2, 2, ColorMode.GRAYSCALE).attach(io.BytesIO())
    with pytest.raises(SinkWriteError):
        sink.write([b"\x01\x02\x03"])


def test_failing_output_is_a_write_error():
    class FullDisk(io.BytesIO):
        def write(self, b):
            raise OSError("No space left on device")

    sink = PngSink(2, 2, ColorMode.GRAYSCALE).attach(FullDisk())
    with pytest.raises(SinkWriteError):
        sink.write([b"\x00" * 4])
