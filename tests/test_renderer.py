import numpy as np
import pytest

from juliaset import (
    ConfigurationError,
    RenderParameters,
    compute_metadata,
    escape_time,
    escape_time_rows,
    pixel_to_complex,
)


def _params(**overrides):
    values = dict(
        width=4,
        height=3,
        x_center=0.0,
        y_center=0.0,
        x_width=3.0,
        y_width=2.25,
        max_iterations=50,
        tolerance=2.0,
        c_real=0.0,
        c_imag=0.0,
    )
    values.update(overrides)
    return RenderParameters(**values)


def test_origin_with_zero_constant_never_escapes():
    params = _params()
    assert escape_time(0.0, 0.0, params) == params.max_iterations


def test_point_outside_tolerance_escapes_immediately():
    params = _params(c_real=-0.79, c_imag=0.15)
    assert escape_time(3.0, 0.0, params) == 0
    assert escape_time(0.0, -2.5, params) == 0


def test_escape_counts_first_iteration_beyond_tolerance():
    params = _params()
    # 1.5 -> 2.25, which lies outside a radius of 2.
    assert escape_time(1.5, 0.0, params) == 1
    # A point exactly on the circle keeps iterating.
    assert escape_time(2.0, 0.0, params) == 1


def test_escape_time_is_bounded_by_max_iterations():
    params = _params(c_real=-0.79, c_imag=0.15, max_iterations=17)
    for x in np.linspace(-1.5, 1.5, 13):
        for y in np.linspace(-1.1, 1.1, 11):
            assert 0 <= escape_time(x, y, params) <= 17


def test_pixel_to_complex_mapping():
    params = _params()
    metadata = compute_metadata(params)
    assert metadata.x_min == pytest.approx(-1.5)
    assert metadata.y_max == pytest.approx(1.125)
    assert metadata.x_max == pytest.approx(1.5)
    assert metadata.y_min == pytest.approx(-1.125)

    assert pixel_to_complex(params, 0, 0) == pytest.approx((-1.5, 1.125))
    assert pixel_to_complex(params, 2, 3) == pytest.approx((0.75, -0.375))


def test_pixel_to_complex_follows_center_offset():
    params = _params(x_center=0.5, y_center=-0.25, width=10, height=8, x_width=2.0, y_width=1.6)
    x, y = pixel_to_complex(params, 4, 5)
    assert x == pytest.approx(0.5 - 1.0 + 5 * 2.0 / 10)
    assert y == pytest.approx(-0.25 + 0.8 - 4 * 1.6 / 8)


def test_vectorised_rows_match_scalar_evaluator():
    params = RenderParameters.from_aspect(40, max_iterations=60)
    rows = range(params.height)
    iterations = escape_time_rows(params, rows)

    assert iterations.shape == (params.height, params.width)
    for row in rows:
        for col in range(params.width):
            x, y = pixel_to_complex(params, row, col)
            assert iterations[row, col] == escape_time(x, y, params)


def test_vectorised_rows_accept_strided_ranges():
    params = RenderParameters.from_aspect(24, max_iterations=40)
    full = escape_time_rows(params, range(params.height))
    strided = escape_time_rows(params, range(1, params.height, 4))
    np.testing.assert_array_equal(strided, full[1::4])


def test_vectorised_rows_empty_range():
    params = RenderParameters.from_aspect(24, max_iterations=40)
    assert escape_time_rows(params, range(0)).shape == (0, 24)


def test_from_aspect_derives_height_and_window():
    params = RenderParameters.from_aspect(100)
    assert params.height == 75
    assert params.y_width == pytest.approx(2.25)
    assert params.c == complex(-0.79, 0.15)


def test_from_aspect_truncates_derived_height():
    assert RenderParameters.from_aspect(10).height == 7
    assert RenderParameters.from_aspect(3000).height == 2250
    assert RenderParameters.from_aspect(300, 1.5).height == 200


def test_from_aspect_keeps_explicit_height():
    params = RenderParameters.from_aspect(100, height=10)
    assert params.height == 10


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_iterations": 0},
        {"tolerance": 0.0},
        {"tolerance": -2.0},
        {"width": 0},
        {"height": 0},
        {"x_width": 0.0},
    ],
)
def test_invalid_parameters_are_rejected(overrides):
    with pytest.raises(ConfigurationError):
        _params(**overrides)


def test_invalid_aspect_ratio_is_rejected():
    with pytest.raises(ConfigurationError):
        RenderParameters.from_aspect(100, 0.0)
