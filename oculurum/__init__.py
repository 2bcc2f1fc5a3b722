"""Render the raw bytes of a file or directory tree as a square PNG image."""
from .compositor import iter_pixels, run
from .modes import ColorMode, CompressionLevel, describe
from .planner import TranscodePlan, plan_transcode
from .sink import PngSink
from .transcode import transcode

__version__ = "0.1.0"
