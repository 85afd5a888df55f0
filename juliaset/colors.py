"""HSV based colour policies for escaped points."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from matplotlib import colormaps as _mpl_colormaps

from .renderer import ConfigurationError

POLICIES = ("power", "log", "colormap")

# Keeps log(d) finite and non-zero for d == 0.
LOG_EPSILON = 1e-9

POWER_VALUE = 0.9
LOG_SATURATION = 0.8
LOG_VALUE = 0.9


@dataclass(frozen=True)
class ColorParameters:
    """Tunables for turning a normalised escape distance into a colour."""

    policy: str = "power"
    exponent: float = 0.9
    constant: float = 0.5
    scale: float = 0.1
    base: float = 10.0
    colormap: str = "twilight_shifted"

    def __post_init__(self) -> None:
        if self.policy not in POLICIES:
            raise ConfigurationError(f"Unknown colour policy '{self.policy}'. Valid choices: {', '.join(POLICIES)}.")
        if self.policy == "power" and not self.scale > 0:
            raise ConfigurationError(f"scale must be positive for the power policy, got {self.scale}")
        if self.policy == "power" and self.exponent < 0:
            raise ConfigurationError(f"exponent must not be negative for the power policy, got {self.exponent}")
        if self.policy == "log" and not self.base > 0:
            raise ConfigurationError(f"base must be positive for the log policy, got {self.base}")
        if self.policy == "colormap" and self.colormap not in _mpl_colormaps:
            raise ConfigurationError(f"Unknown matplotlib colormap '{self.colormap}'.")


def get_colormap(name):
    return _mpl_colormaps[name]


def pack_rgb(r: int, g: int, b: int) -> int:
    return (r << 16) | (g << 8) | b


def unpack_rgb(value: int) -> tuple[int, int, int]:
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def hsv_to_rgb(hue: float, saturation: float, value: float) -> tuple[int, int, int]:
    """Convert ``hue`` in degrees plus saturation and value to 8-bit RGB."""

    chroma = value * saturation
    x = chroma * (1 - abs(math.fmod(hue / 60.0, 2) - 1))
    m = value - chroma

    if 0 <= hue < 60:
        r, g, b = chroma, x, 0.0
    elif 60 <= hue < 120:
        r, g, b = x, chroma, 0.0
    elif 120 <= hue < 180:
        r, g, b = 0.0, chroma, x
    elif 180 <= hue < 240:
        r, g, b = 0.0, x, chroma
    elif 240 <= hue < 300:
        r, g, b = x, 0.0, chroma
    else:
        r, g, b = chroma, 0.0, x

    return int((r + m) * 255), int((g + m) * 255), int((b + m) * 255)


def power_color(distance: float, params: ColorParameters) -> tuple[int, int, int]:
    color = distance ** params.exponent
    hue = (params.constant + distance / params.scale) % 1.0
    return hsv_to_rgb(hue * 360.0, 1 - 0.6 * color, POWER_VALUE)


def _clamp_distance(distance):
    return np.clip(distance, LOG_EPSILON, 1.0 - LOG_EPSILON)


def log_color(distance: float, params: ColorParameters) -> tuple[int, int, int]:
    distance = float(_clamp_distance(distance))
    color = -math.log(params.base) / math.log(distance)
    hue = (params.constant + params.scale * color) % 360.0
    return hsv_to_rgb(hue, LOG_SATURATION, LOG_VALUE)


def colormap_color(distance: float, params: ColorParameters) -> tuple[int, int, int]:
    rgba = get_colormap(params.colormap)(float(distance))
    return tuple(int(np.clip(channel * 255, 0, 255)) for channel in rgba[:3])


_SCALAR_POLICIES = {
    "power": power_color,
    "log": log_color,
    "colormap": colormap_color,
}


def map_color(distance: float, params: ColorParameters) -> tuple[int, int, int]:
    """Colour a single escaped point with normalised distance ``distance``."""

    return _SCALAR_POLICIES[params.policy](distance, params)


def hsv_to_rgb_array(hue: np.ndarray, saturation, value) -> np.ndarray:
    """Array version of :func:`hsv_to_rgb`; returns an ``(..., 3)`` uint8 array."""

    hue = np.asarray(hue, dtype=np.float64)
    saturation = np.broadcast_to(np.asarray(saturation, dtype=np.float64), hue.shape)
    value = np.broadcast_to(np.asarray(value, dtype=np.float64), hue.shape)

    chroma = value * saturation
    x = chroma * (1 - np.abs(np.fmod(hue / 60.0, 2) - 1))
    m = value - chroma
    zero = np.zeros_like(hue)

    sector = np.select(
        [hue < 60, hue < 120, hue < 180, hue < 240, hue < 300],
        [0, 1, 2, 3, 4],
        default=5,
    )
    # Negative hues fall through to the last sector, as in hsv_to_rgb.
    sector = np.where(hue < 0, 5, sector)

    r = np.choose(sector, [chroma, x, zero, zero, x, chroma])
    g = np.choose(sector, [x, chroma, chroma, x, zero, zero])
    b = np.choose(sector, [zero, zero, x, chroma, chroma, x])

    rgb = np.stack((r + m, g + m, b + m), axis=-1) * 255
    return np.trunc(rgb).astype(np.uint8)


def _power_array(distance: np.ndarray, params: ColorParameters) -> np.ndarray:
    color = distance ** params.exponent
    hue = np.mod(params.constant + distance / params.scale, 1.0)
    return hsv_to_rgb_array(hue * 360.0, 1 - 0.6 * color, POWER_VALUE)


def _log_array(distance: np.ndarray, params: ColorParameters) -> np.ndarray:
    distance = _clamp_distance(distance)
    color = -math.log(params.base) / np.log(distance)
    hue = np.mod(params.constant + params.scale * color, 360.0)
    return hsv_to_rgb_array(hue, LOG_SATURATION, LOG_VALUE)


def _colormap_array(distance: np.ndarray, params: ColorParameters) -> np.ndarray:
    rgba = np.asarray(get_colormap(params.colormap)(distance))
    return np.clip(rgba[..., :3] * 255, 0, 255).astype(np.uint8)


_ARRAY_POLICIES = {
    "power": _power_array,
    "log": _log_array,
    "colormap": _colormap_array,
}


def colorize(iterations: np.ndarray, max_iterations: int, params: ColorParameters) -> np.ndarray:
    """Pack the colour of every escaped cell of ``iterations`` as ``0xRRGGBB``.

    Cells that reached ``max_iterations`` are left at ``0``.
    """

    packed = np.zeros(iterations.shape, dtype=np.uint32)
    escaped = iterations < max_iterations
    if not escaped.any():
        return packed

    distance = iterations[escaped].astype(np.float64) / max_iterations
    rgb = _ARRAY_POLICIES[params.policy](distance, params).astype(np.uint32)
    packed[escaped] = (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]
    return packed
