"""Tagged status lines on stderr that play nicely with tqdm progress bars."""
import sys

from tqdm import tqdm


def _emit(tag, message):
    tqdm.write(f"[{tag}] {message}", file=sys.stderr)


def info(message):
    _emit("INFO", message)


def warn(message):
    _emit("WARN", message)


def error(message):
    _emit("ERROR", message)


def success(message):
    _emit("SUCCESS", message)
