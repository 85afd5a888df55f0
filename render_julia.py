import sys
import time
from argparse import ArgumentParser
from pathlib import Path

from juliaset import (
    PRESETS,
    ColorParameters,
    ConfigurationError,
    RenderParameters,
    WorkerPoolError,
    compute_metadata,
    detect_threads,
    render_grid,
    write_bitmap,
)
from juliaset.colors import POLICIES
from juliaset.renderer import DEFAULT_PRESET
from juliaset.workers import DEFAULT_SCHEDULE, SCHEDULES

_VERBOSE_FLAGS = {"--verbose", "-v"}
VERBOSE = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


def build_parser():
    parser = ArgumentParser(description="Render a Julia set to an uncompressed 24-bit BMP file.")

    parser.add_argument('--output', type=str,
                        dest='output', help='path of the BMP file to write',
                        metavar='OUTPUT', default='output.bmp')

    parser.add_argument('--width', type=int,
                        dest='width', help='number of pixels along the x-axis',
                        metavar='WIDTH', default=3000)

    parser.add_argument('--height', type=int,
                        dest='height', help='number of pixels along the y-axis. Derived from --aspect-ratio when omitted.',
                        metavar='HEIGHT', default=None)

    parser.add_argument('--aspect-ratio', type=float,
                        dest='aspect_ratio', help='width divided by height of both the image and the sample window',
                        metavar='ASPECT_RATIO', default=4 / 3)

    parser.add_argument('--x-center', type=float,
                        dest='x_center', help='x coordinate in the complex plane at the centre of the image',
                        metavar='X_CENTER', default=0.0)

    parser.add_argument('--y-center', type=float,
                        dest='y_center', help='y coordinate in the complex plane at the centre of the image',
                        metavar='Y_CENTER', default=0.0)

    parser.add_argument('--x-width', type=float,
                        dest='x_width', help='width of the sample window in the complex plane',
                        metavar='X_WIDTH', default=3.0)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iterations a point must survive to count as inside the set',
                        metavar='MAX_ITERATIONS', default=200)

    parser.add_argument('--tolerance', type=float,
                        dest='tolerance', help='magnitude that marks a point as escaped',
                        metavar='TOLERANCE', default=2.0)

    parser.add_argument('--preset', choices=sorted(PRESETS), default=DEFAULT_PRESET,
                        help='named Julia constant c. --c-real/--c-imag override its parts.')
    parser.add_argument('--c-real', type=float, dest='c_real', default=None,
                        help='real part of the Julia constant c', metavar='C_REAL')
    parser.add_argument('--c-imag', type=float, dest='c_imag', default=None,
                        help='imaginary part of the Julia constant c', metavar='C_IMAG')

    parser.add_argument('--color', choices=POLICIES, dest='policy', default='power',
                        help='colour policy for escaped points')
    parser.add_argument('--exponent', type=float, default=0.9,
                        help='exponent applied to the distance by the power policy')
    parser.add_argument('--constant', type=float, default=0.5,
                        help='hue offset shared by the power and log policies')
    parser.add_argument('--scale', type=float, default=0.1,
                        help='hue scale shared by the power and log policies')
    parser.add_argument('--base', type=float, default=10.0,
                        help='logarithm base of the log policy')
    parser.add_argument('--colormap', type=str, default='twilight_shifted',
                        help='matplotlib colormap used by the colormap policy (e.g. "viridis", "inferno")')

    parser.add_argument('--threads', type=int, dest='threads', default=None,
                        help='number of worker threads. Defaults to the detected CPU count.', metavar='THREADS')
    parser.add_argument('--schedule', choices=SCHEDULES, default=DEFAULT_SCHEDULE,
                        help='row assignment: "absorb" gives the last band the remainder rows, '
                             '"truncate" leaves them black, "interleave" deals rows round-robin.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print the sample window, colour settings and row bands.')

    return parser


def resolve_parameters(opt, parser: ArgumentParser) -> tuple[RenderParameters, ColorParameters, int]:
    """Turn parsed options into validated render settings, or exit through ``parser.error``."""

    c_real, c_imag = PRESETS[opt.preset]
    if opt.c_real is not None:
        c_real = opt.c_real
    if opt.c_imag is not None:
        c_imag = opt.c_imag

    threads = opt.threads if opt.threads is not None else detect_threads()

    try:
        params = RenderParameters.from_aspect(
            opt.width,
            opt.aspect_ratio,
            height=opt.height,
            x_center=opt.x_center,
            y_center=opt.y_center,
            x_width=opt.x_width,
            max_iterations=opt.max_iterations,
            tolerance=opt.tolerance,
            c=complex(c_real, c_imag),
        )
        color_params = ColorParameters(
            policy=opt.policy,
            exponent=opt.exponent,
            constant=opt.constant,
            scale=opt.scale,
            base=opt.base,
            colormap=opt.colormap,
        )
    except ConfigurationError as exc:
        parser.error(str(exc))

    if threads < 1:
        parser.error(f"--threads must be at least 1, got {threads}")

    return params, color_params, threads


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    params, color_params, threads = resolve_parameters(opt, parser)
    output_path = Path(opt.output).expanduser()

    metadata = compute_metadata(params)
    log("Window: x in [{0:.6g}, {1:.6g}), y in ({2:.6g}, {3:.6g}]".format(
        metadata.x_min, metadata.x_max, metadata.y_min, metadata.y_max))
    log("Image: {0}x{1}, c = {2}, max iterations {3}".format(params.width, params.height, params.c, params.max_iterations))
    log("Colour policy: {0}".format(color_params))

    print("Generating Julia Set...")
    print("Thread capacity: {0}".format(threads))

    def on_launch(idx, rows):
        print("Launched thread: {0}".format(idx))
        log("  rows {0}".format(rows))

    start = time.perf_counter()
    try:
        grid = render_grid(params, color_params, threads=threads, schedule=opt.schedule, on_launch=on_launch)
    except WorkerPoolError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    elapsed = time.perf_counter() - start
    print("Computing the Julia Set took {0:.3f} s.".format(elapsed))

    try:
        written = write_bitmap(output_path, grid)
    except OSError as exc:
        print(f"error: could not write {output_path}: {exc}", file=sys.stderr)
        return 1

    print("Saved {0}".format(written))
    return 0


if __name__ == '__main__':
    sys.exit(main())
