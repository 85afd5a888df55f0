import pytest

import render_julia
from juliaset import PRESETS


def _run(tmp_path, *args, name="julia.bmp"):
    output = tmp_path / name
    code = render_julia.main(["--width", "100", "--max-iterations", "60", "--output", str(output), *args])
    return code, output


@pytest.mark.parametrize("threads", ["1", "8"])
def test_file_size_is_independent_of_thread_count(tmp_path, threads):
    code, output = _run(tmp_path, "--threads", threads)
    assert code == 0
    assert output.stat().st_size == 54 + 100 * 75 * 3


def test_identical_runs_are_byte_identical(tmp_path):
    _, first = _run(tmp_path, "--threads", "4", name="first.bmp")
    _, second = _run(tmp_path, "--threads", "4", name="second.bmp")
    assert first.read_bytes() == second.read_bytes()


def test_progress_report(tmp_path, capsys):
    code, output = _run(tmp_path, "--threads", "2")
    out = capsys.readouterr().out

    assert code == 0
    assert "Generating Julia Set..." in out
    assert "Thread capacity: 2" in out
    assert "Launched thread: 0" in out
    assert "Launched thread: 1" in out
    assert "Launched thread: 2" not in out
    assert "Computing the Julia Set took" in out
    assert str(output) in out


@pytest.mark.parametrize(
    "args",
    [
        ["--max-iterations", "0"],
        ["--tolerance", "0"],
        ["--threads", "0"],
        ["--width", "0"],
        ["--aspect-ratio", "-1"],
        ["--color", "log", "--base", "0"],
        ["--color", "colormap", "--colormap", "no-such-map"],
        ["--x-width", "8", "--exponent", "-1"],
    ],
)
def test_configuration_errors_exit_before_rendering(tmp_path, capsys, args):
    output = tmp_path / "never.bmp"
    with pytest.raises(SystemExit) as excinfo:
        render_julia.main(["--width", "16", "--output", str(output), *args])
    assert excinfo.value.code == 2
    assert not output.exists()
    assert "Generating Julia Set..." not in capsys.readouterr().out


def test_write_failure_exits_non_zero(tmp_path, capsys):
    blocker = tmp_path / "occupied"
    blocker.write_text("not a directory")
    code = render_julia.main(["--width", "16", "--threads", "1", "--output", str(blocker / "julia.bmp")])

    assert code == 1
    assert "error:" in capsys.readouterr().err


def test_preset_and_constant_overrides():
    parser = render_julia.build_parser()

    opt = parser.parse_args(["--preset", "julia3", "--width", "16"])
    params, color_params, threads = render_julia.resolve_parameters(opt, parser)
    assert params.c == complex(*PRESETS["julia3"])
    assert color_params.policy == "power"
    assert threads >= 1

    opt = parser.parse_args(["--preset", "julia3", "--c-imag", "0.25", "--width", "16", "--threads", "3"])
    params, _, threads = render_julia.resolve_parameters(opt, parser)
    assert params.c == complex(PRESETS["julia3"][0], 0.25)
    assert threads == 3


def test_explicit_height_overrides_aspect_ratio():
    parser = render_julia.build_parser()
    opt = parser.parse_args(["--width", "16", "--height", "5"])
    params, _, _ = render_julia.resolve_parameters(opt, parser)
    assert (params.width, params.height) == (16, 5)


def test_verbose_flag_prints_window(tmp_path, capsys):
    code, _ = _run(tmp_path, "--threads", "1", "--verbose")
    assert code == 0
    assert "Window:" in capsys.readouterr().out
