from __future__ import annotations

import math

import numpy as np
import pytest

from basic_fits import decode
from basic_fits.render import GRAY_RAMP, gray_to_char, log_stretch, normalize, to_ascii
from basic_fits.stats import describe

from fitsgen import simple_image


def test_describe_decoded_data():
    res = decode(simple_image(np.array([[1.0, 2.0], [3.0, 4.0]])))
    st = describe(res.data)
    assert st.count == 4
    assert st.sum == 10.0
    assert st.mean == 2.5
    assert st.std == pytest.approx(math.sqrt(1.25))
    assert (st.min, st.max) == (1.0, 4.0)
    assert st.as_dict()["count"] == 4


def test_describe_ignores_non_finite():
    st = describe(np.array([1.0, np.nan, 3.0, np.inf]))
    assert st.count == 2
    assert st.mean == 2.0


def test_describe_empty_raises():
    with pytest.raises(ValueError):
        describe(np.array([np.nan]))


def test_normalize_range_and_flat():
    out = normalize(np.array([0.0, 5.0, 10.0]))
    assert out.tolist() == [0.0, 127.5, 255.0]
    assert normalize(np.full(4, 3.0)).tolist() == [0.0] * 4
    clipped = normalize(np.array([-5.0, 5.0, 50.0]), vmin=0.0, vmax=10.0)
    assert clipped.tolist() == [0.0, 127.5, 255.0]
    assert normalize(np.array([np.nan, 1.0, 2.0]))[0] == 0.0


def test_gray_ramp_ends():
    assert len(GRAY_RAMP) == 69
    assert gray_to_char(255) == "$"
    assert gray_to_char(0) == "."
    assert gray_to_char(1e9) == "$"


def test_log_stretch():
    out = log_stretch(np.array([0.0, 9.0, 1000.0]), 0.0, 99.0)
    assert out.tolist() == pytest.approx([0.0, 1.0, 2.0])
    with pytest.raises(ValueError):
        log_stretch(np.zeros(2), -1.0, 1.0)


def test_to_ascii_shape_and_origin():
    img = np.zeros((4, 3))
    img[0, :] = 1.0  # first image row is bright
    lines = to_ascii(img)
    # rows are sampled at twice the column step
    assert len(lines) == 2
    assert all(len(line) == 3 for line in lines)
    assert lines[-1] == "$$$"
    assert to_ascii(img, origin="upper")[0] == "$$$"


def test_to_ascii_downsamples():
    lines = to_ascii(np.random.default_rng(0).random((100, 200)), width=50)
    assert max(len(line) for line in lines) <= 50
    assert len(lines) == 13


def test_to_ascii_needs_2d():
    with pytest.raises(ValueError):
        to_ascii(np.zeros(3))
