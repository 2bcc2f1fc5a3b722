import sys
from contextlib import closing

from tqdm import tqdm

from . import report
from .transcode import transcode

# CONFIG
CHUNK_SIZE = 4096


def _read_chunks(path, chunk_size):
    # an unreadable file is skipped, the rest of the run goes on
    try:
        f = open(path, "rb")
    except OSError as exc:
        report.warn(f"Couldn't open {path}: {exc}")
        return

    with f:
        while True:
            try:
                chunk = f.read(chunk_size)
            except OSError as exc:
                report.warn(f"Read failed in {path}, moving on: {exc}")
                return
            if not chunk:
                return
            yield chunk


def iter_pixels(plan, chunk_size=CHUNK_SIZE, progress=True):
    """Yield the pixel stream for `plan`, padded to exactly `plan.capacity` bytes.

    Reading stops as soon as the image is full; whatever input is left is
    dropped with a warning. No yielded block is larger than one transcoded
    chunk.
    """
    capacity = plan.capacity
    written = 0
    consumed = 0

    with tqdm(total=plan.total_bytes, unit="B", unit_scale=True, desc="Writing",
              file=sys.stderr, leave=False, disable=not progress) as bar:
        for path in plan.files:
            report.info(f"Writing data from {path}")
            with closing(_read_chunks(path, chunk_size)) as chunks:
                for chunk in chunks:
                    bar.update(len(chunk))
                    consumed += len(chunk)
                    data = transcode(chunk, plan.mode)

                    room = capacity - written
                    if len(data) > room:
                        # count in input bytes, unread planned input included
                        ratio = len(data) // len(chunk)
                        dropped = (len(data) - room) // ratio
                        dropped += max(0, plan.total_bytes - consumed)
                        report.warn(f"Input exceeded the {plan.dimension}x{plan.dimension} "
                                    f"image, {dropped} bytes dropped")
                        if room:
                            yield data[:room]
                        return

                    written += len(data)
                    yield data

    # Pad up to the full image
    zeros = bytes(chunk_size)
    padding = capacity - written
    while padding > 0:
        n = min(padding, chunk_size)
        yield zeros if n == chunk_size else zeros[:n]
        padding -= n


def run(plan, sink, chunk_size=CHUNK_SIZE, progress=True):
    """Stream every input of `plan` through `sink` and finalize it.

    Returns the number of scanlines written.
    """
    rows = sink.write(iter_pixels(plan, chunk_size=chunk_size, progress=progress))
    sink.finalize()
    return rows
