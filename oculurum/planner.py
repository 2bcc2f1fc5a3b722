"""Sizing of the input before any pixel is written.

The PNG header needs width and height up front, so the whole input is
measured first and the square dimension is fixed from the total.
"""
import math
import os
import stat
from dataclasses import dataclass

from . import report
from .errors import MetadataUnavailable, TraversalFailed
from .modes import ColorMode, CompressionLevel, describe


@dataclass(frozen=True)
class TranscodePlan:
    dimension: int
    bytes_per_pixel: int
    files: tuple
    mode: ColorMode
    compression: CompressionLevel
    total_bytes: int

    @property
    def capacity(self):
        """Bytes needed to fill every pixel of the image."""
        return self.dimension * self.dimension * self.bytes_per_pixel


def dimension_for(total_bytes, mode):
    # +1 so truncation never under-sizes, and an empty input still gets a pixel
    return int(math.sqrt(describe(mode).multiplier * total_bytes)) + 1


def collect_files(root):
    """Walk `root` recursively and return (total size, regular file paths).

    Paths come back in directory-read order. Symlinks to files are followed,
    symlinked directories and special files are skipped.
    """
    files = []
    try:
        total = _walk(root, files)
    except OSError as exc:
        raise TraversalFailed(f"Error in calculating directory size: {exc}") from exc
    return total, files


def _walk(directory, files):
    size = 0
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                size += _walk(entry.path, files)
                continue
            st = entry.stat()  # follows file symlinks, raises on broken ones
            if stat.S_ISREG(st.st_mode):
                size += st.st_size
                files.append(entry.path)
            elif stat.S_ISDIR(st.st_mode):
                report.warn(f"Not following directory symlink {entry.path}")
            else:
                report.warn(f"Skipping special file {entry.path}")
    return size


def plan_transcode(path, mode, compression=CompressionLevel.DEFAULT):
    path = os.fspath(path)
    if os.path.isdir(path):
        total, files = collect_files(path)
    else:
        try:
            st = os.stat(path)
        except OSError as exc:
            raise MetadataUnavailable(f"Couldn't get file metadata: {exc}") from exc
        # devices and pipes have no meaningful size and may never reach EOF
        if not stat.S_ISREG(st.st_mode):
            raise MetadataUnavailable(f"Not a regular file or directory: {path}")
        total = st.st_size
        files = [path]

    return TranscodePlan(
        dimension=dimension_for(total, mode),
        bytes_per_pixel=describe(mode).bytes_per_pixel,
        files=tuple(files),
        mode=mode,
        compression=compression,
        total_bytes=total,
    )
