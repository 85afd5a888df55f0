"""Escape-time primitives for Julia set frames."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

PRESETS = {
    "julia1": (-0.79, 0.15),
    "julia2": (-0.162, 1.04),
    "julia3": (-0.4, 0.6),
    "julia4": (-0.7269, 0.1889),
}

DEFAULT_PRESET = "julia1"


class ConfigurationError(ValueError):
    """Raised when render or colour settings cannot produce a frame."""


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of a Julia set."""

    width: int
    height: int
    x_center: float
    y_center: float
    x_width: float
    y_width: float
    max_iterations: int
    tolerance: float
    c_real: float
    c_imag: float

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(f"image size must be positive, got {self.width}x{self.height}")
        if self.max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be at least 1, got {self.max_iterations}")
        if not self.tolerance > 0:
            raise ConfigurationError(f"tolerance must be positive, got {self.tolerance}")
        if not (self.x_width > 0 and self.y_width > 0):
            raise ConfigurationError("the sample window must have a positive width and height")

    @classmethod
    def from_aspect(
        cls,
        width: int = 3000,
        aspect_ratio: float = 4 / 3,
        *,
        height: int | None = None,
        x_center: float = 0.0,
        y_center: float = 0.0,
        x_width: float = 3.0,
        max_iterations: int = 200,
        tolerance: float = 2.0,
        c: complex = complex(*PRESETS[DEFAULT_PRESET]),
    ) -> "RenderParameters":
        """Build parameters whose height and plane height follow ``aspect_ratio``."""

        if not aspect_ratio > 0:
            raise ConfigurationError(f"aspect_ratio must be positive, got {aspect_ratio}")
        if height is None:
            height = int(width / aspect_ratio + 1e-9)
        return cls(
            width=width,
            height=height,
            x_center=x_center,
            y_center=y_center,
            x_width=x_width,
            y_width=x_width / aspect_ratio,
            max_iterations=max_iterations,
            tolerance=tolerance,
            c_real=c.real,
            c_imag=c.imag,
        )

    @property
    def c(self) -> complex:
        return complex(self.c_real, self.c_imag)


@dataclass(frozen=True)
class SamplingMetadata:
    """Bounds of the complex-plane window sampled by a frame."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float


def compute_metadata(params: RenderParameters) -> SamplingMetadata:
    x_min = params.x_center - params.x_width / 2.0
    y_max = params.y_center + params.y_width / 2.0
    return SamplingMetadata(
        x_min=x_min,
        x_max=x_min + params.x_width,
        y_min=y_max - params.y_width,
        y_max=y_max,
    )


def pixel_to_complex(params: RenderParameters, row: int, col: int) -> tuple[float, float]:
    """Map grid cell ``(row, col)`` to its point in the complex plane."""

    metadata = compute_metadata(params)
    x = metadata.x_min + col * params.x_width / params.width
    y = metadata.y_max - row * params.y_width / params.height
    return x, y


def escape_time(z_real: float, z_imag: float, params: RenderParameters) -> int:
    """Count iterations of ``z * z + c`` before ``|z|`` exceeds the tolerance.

    Returns ``params.max_iterations`` when the orbit stays bounded for the
    whole budget.
    """

    horizon = params.tolerance * params.tolerance
    c_real = params.c_real
    c_imag = params.c_imag
    zr = float(z_real)
    zi = float(z_imag)
    n = 0
    while zr * zr + zi * zi <= horizon and n < params.max_iterations:
        zr, zi = zr * zr - zi * zi + c_real, 2.0 * zr * zi + c_imag
        n += 1
    return n


def sample_rows(params: RenderParameters, rows: range) -> tuple[np.ndarray, np.ndarray]:
    """Return the real and imaginary starting values for ``rows`` as 2D arrays."""

    metadata = compute_metadata(params)
    cols = np.arange(params.width, dtype=np.float64)
    row_idx = np.asarray(rows, dtype=np.float64)
    x = metadata.x_min + cols * params.x_width / params.width
    y = metadata.y_max - row_idx * params.y_width / params.height
    zr, zi = np.meshgrid(x, y)
    return zr, zi


def escape_time_rows(params: RenderParameters, rows: range) -> np.ndarray:
    """Vectorised :func:`escape_time` for every pixel of ``rows``."""

    zr, zi = sample_rows(params, rows)
    ns = np.zeros(zr.shape, dtype=np.int32)
    horizon = np.float64(params.tolerance) * np.float64(params.tolerance)
    c_real = np.float64(params.c_real)
    c_imag = np.float64(params.c_imag)

    active = zr * zr + zi * zi <= horizon
    for _ in range(params.max_iterations):
        if not active.any():
            break
        ar = zr[active]
        ai = zi[active]
        zr[active] = ar * ar - ai * ai + c_real
        zi[active] = 2.0 * ar * ai + c_imag
        ns[active] += 1
        active &= zr * zr + zi * zi <= horizon
    return ns
