"""Row partitioning and the fork-join worker pool that fills the pixel grid."""

from __future__ import annotations

import os
from concurrent.futures import ALL_COMPLETED, ThreadPoolExecutor, wait
from typing import Callable, Optional

import numpy as np

from .colors import ColorParameters, colorize
from .renderer import ConfigurationError, RenderParameters, escape_time_rows

SCHEDULES = ("absorb", "truncate", "interleave")
DEFAULT_SCHEDULE = "absorb"


class WorkerPoolError(RuntimeError):
    """Raised when the pool cannot start every worker it was asked for."""


def detect_threads() -> int:
    return os.cpu_count() or 1


def partition_rows(height: int, threads: int, schedule: str = DEFAULT_SCHEDULE) -> list[range]:
    """Split ``height`` rows into ``threads`` disjoint bands.

    ``truncate`` gives band ``i`` the rows ``[q*i, q*(i+1))`` with
    ``q = height // threads`` and leaves the remainder unassigned.
    ``absorb`` does the same but lets the last band run to ``height``.
    ``interleave`` gives band ``i`` every row with ``row % threads == i``.
    """

    if threads < 1:
        raise ConfigurationError(f"thread count must be at least 1, got {threads}")
    if height < 0:
        raise ConfigurationError(f"height must not be negative, got {height}")
    if schedule not in SCHEDULES:
        raise ConfigurationError(f"Unknown schedule '{schedule}'. Valid choices: {', '.join(SCHEDULES)}.")

    if schedule == "interleave":
        return [range(idx, height, threads) for idx in range(threads)]

    rows_per_band = height // threads
    bands = [range(rows_per_band * idx, rows_per_band * (idx + 1)) for idx in range(threads)]
    if schedule == "absorb":
        bands[-1] = range(bands[-1].start, height)
    return bands


def _band_slice(rows: range) -> slice:
    return slice(rows.start, rows.stop, rows.step)


def render_band(
    grid: np.ndarray,
    rows: range,
    params: RenderParameters,
    color_params: ColorParameters,
) -> None:
    """Evaluate and colour ``rows``, writing escaped cells into ``grid``.

    Each band owns its rows exclusively, so the write needs no lock.
    """

    if len(rows) == 0:
        return
    iterations = escape_time_rows(params, rows)
    colors = colorize(iterations, params.max_iterations, color_params)
    escaped = iterations < params.max_iterations
    band = grid[_band_slice(rows)]
    band[escaped] = colors[escaped]


def allocate_grid(params: RenderParameters) -> np.ndarray:
    return np.zeros((params.height, params.width), dtype=np.uint32)


def render_grid(
    params: RenderParameters,
    color_params: ColorParameters,
    threads: Optional[int] = None,
    schedule: str = DEFAULT_SCHEDULE,
    on_launch: Optional[Callable[[int, range], None]] = None,
) -> np.ndarray:
    """Fill a fresh pixel grid using one worker thread per row band.

    Returns only after every worker has finished; the first worker failure is
    re-raised. Bands are tasks on a pool of ``threads`` threads, so a short
    band may run on a thread that already finished an earlier band.
    ``on_launch`` is called once per band, not once per OS thread.
    """

    if threads is None:
        threads = detect_threads()
    bands = partition_rows(params.height, threads, schedule)
    grid = allocate_grid(params)

    with ThreadPoolExecutor(max_workers=threads) as executor:
        futures = []
        for idx, rows in enumerate(bands):
            if on_launch is not None:
                on_launch(idx, rows)
            try:
                futures.append(executor.submit(render_band, grid, rows, params, color_params))
            except RuntimeError as exc:
                raise WorkerPoolError(f"could not start worker {idx} of {threads}: {exc}") from exc
        wait(futures, return_when=ALL_COMPLETED)

    for future in futures:
        future.result()
    return grid
