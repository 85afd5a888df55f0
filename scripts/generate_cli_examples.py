from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "320", "--threads", "4"]


@dataclass
class Example:
    name: str
    args: list[str]

    @property
    def output(self) -> Path:
        return EXAMPLES_ROOT / self.name / f"{self.name}.bmp"

    def full_args(self) -> list[str]:
        return [sys.executable, "render_julia.py", *BASE_ARGS, *self.args, "--output", str(self.output)]


EXAMPLES: list[Example] = [
    Example(name="julia1", args=["--preset", "julia1"]),
    Example(name="julia2", args=["--preset", "julia2"]),
    Example(name="julia3", args=["--preset", "julia3"]),
    Example(name="julia4", args=["--preset", "julia4"]),
    Example(name="custom-c", args=["--c-real", "0.285", "--c-imag", "0.01"]),
    Example(name="log-color", args=["--color", "log", "--scale", "0.3"]),
    Example(name="colormap", args=["--color", "colormap", "--colormap", "inferno"]),
    Example(name="exponent", args=["--exponent", "2.5", "--constant", "0.1"]),
    Example(name="x-center", args=["--x-center", "0.4", "--x-width", "0.8"]),
    Example(name="max-iterations", args=["--max-iterations", "800"]),
    Example(name="tolerance", args=["--tolerance", "10"]),
    Example(name="square", args=["--aspect-ratio", "1"]),
    Example(name="truncate", args=["--schedule", "truncate", "--threads", "7"]),
    Example(name="interleave", args=["--schedule", "interleave"]),
    Example(name="verbose", args=["--verbose"]),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _verify(example: Example) -> None:
    if not example.output.is_file():
        raise RuntimeError(f"Expected file {example.output} was not created")
    with open(example.output, "rb") as handle:
        if handle.read(2) != b"BM":
            raise RuntimeError(f"{example.output} is not a BMP file")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.output.parent])
        completed = subprocess.run(example.full_args(), check=True)
        if completed.returncode != 0:
            raise RuntimeError(f"Example {example.name} failed with {completed.returncode}")
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
