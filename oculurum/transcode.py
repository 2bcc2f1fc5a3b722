import numpy as np

from .modes import ColorMode

BLACK_PX = 0x00
WHITE_PX = 0xFF


def transcode(chunk, mode):
    """Turn a chunk of input bytes into pixel channel bytes for `mode`.

    Bitwise mode spreads every bit over its own grayscale pixel, least
    significant bit first, so one byte becomes eight 0x00/0xFF pixels.
    Every other mode passes the bytes through; the PNG layout decides how
    consecutive bytes are split into channels.
    """
    if mode is not ColorMode.BITWISE:
        return bytes(chunk)
    bits = np.unpackbits(np.frombuffer(chunk, dtype=np.uint8), bitorder="little")
    return np.where(bits, WHITE_PX, BLACK_PX).astype(np.uint8).tobytes()
