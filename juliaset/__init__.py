"""Public API for Julia set rendering utilities."""

from .bitmap import encode_bitmap, write_bitmap
from .colors import ColorParameters, colorize, hsv_to_rgb, map_color, pack_rgb, unpack_rgb
from .renderer import (
    PRESETS,
    ConfigurationError,
    RenderParameters,
    SamplingMetadata,
    compute_metadata,
    escape_time,
    escape_time_rows,
    pixel_to_complex,
)
from .workers import WorkerPoolError, detect_threads, partition_rows, render_band, render_grid

__all__ = [
    "PRESETS",
    "ColorParameters",
    "ConfigurationError",
    "RenderParameters",
    "SamplingMetadata",
    "WorkerPoolError",
    "colorize",
    "compute_metadata",
    "detect_threads",
    "encode_bitmap",
    "escape_time",
    "escape_time_rows",
    "hsv_to_rgb",
    "map_color",
    "pack_rgb",
    "partition_rows",
    "pixel_to_complex",
    "render_band",
    "render_grid",
    "unpack_rgb",
    "write_bitmap",
]
