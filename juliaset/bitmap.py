"""Uncompressed 24-bit BMP encoding for packed ``0xRRGGBB`` pixel grids."""

from __future__ import annotations

import struct
from pathlib import Path

import numpy as np

FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40
PIXEL_OFFSET = FILE_HEADER_SIZE + INFO_HEADER_SIZE
BITS_PER_PIXEL = 24


def row_padding(width: int) -> int:
    """Number of zero bytes closing each row so it spans a multiple of 4."""

    return (4 - (width * 3) % 4) % 4


def encode_header(width: int, height: int) -> bytes:
    file_size = PIXEL_OFFSET + width * height * 3
    file_header = struct.pack("<2sIHHI", b"BM", file_size, 0, 0, PIXEL_OFFSET)
    info_header = struct.pack(
        "<IiiHHIIiiII",
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        BITS_PER_PIXEL,
        0,
        0,
        0,
        0,
        0,
        0,
    )
    return file_header + info_header


def encode_pixels(grid: np.ndarray) -> bytes:
    """Serialize ``grid`` bottom row first, three bytes per pixel in B, G, R order."""

    height, width = grid.shape
    packed = np.ascontiguousarray(grid[::-1], dtype="<u4")
    bgr = packed.view(np.uint8).reshape(height, width, 4)[:, :, :3]
    rows = bgr.reshape(height, width * 3)
    padding = row_padding(width)
    if padding:
        rows = np.concatenate((rows, np.zeros((height, padding), dtype=np.uint8)), axis=1)
    return rows.tobytes()


def encode_bitmap(grid: np.ndarray) -> bytes:
    if grid.ndim != 2:
        raise ValueError(f"expected a 2D pixel grid, got shape {grid.shape}")
    height, width = grid.shape
    return encode_header(width, height) + encode_pixels(grid)


def write_bitmap(output_path: Path, grid: np.ndarray) -> Path:
    """Write ``grid`` to ``output_path`` as a BMP file.

    ``OSError`` from creating the directory or writing the file propagates.
    """

    output_path = Path(output_path)
    data = encode_bitmap(grid)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "wb") as handle:
        handle.write(data)
    return output_path
