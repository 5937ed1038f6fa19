import numpy as np
import pytest

from voxnoise.core import Lattice2D, fade, grad2_table, lerp, make_permutation, seed_to_int


def test_fade_endpoints():
    t = np.array([0.0, 1.0], dtype=np.float64)
    out = fade(t)
    assert out[0] == 0.0
    assert out[1] == 1.0


def test_lerp_basic():
    a = np.array([0.0, 10.0])
    b = np.array([10.0, 20.0])
    t = np.array([0.0, 0.5])
    out = lerp(a, b, t)
    assert np.allclose(out, np.array([0.0, 15.0]))


def test_make_permutation_is_doubled_shuffle():
    p = make_permutation(7)
    assert p.shape == (512,)
    assert np.array_equal(p[:256], p[256:])
    assert sorted(p[:256].tolist()) == list(range(256))
    assert np.array_equal(p, make_permutation(7))


def test_seed_to_int_spreads_unit_floats():
    assert seed_to_int(42) == 42
    assert seed_to_int(42.9) == 42
    assert seed_to_int(0.5) == 32768
    assert seed_to_int(-3) == 3


def test_seed_to_int_rejects_non_finite():
    with pytest.raises(ValueError):
        seed_to_int(float("nan"))


def test_lattice_wraps_negative_coordinates():
    perm = make_permutation(0)
    a = Lattice2D.locate(perm, np.array([-0.25]), np.array([3.5]))
    b = Lattice2D.locate(perm, np.array([255.75]), np.array([259.5]))
    assert np.array_equal(a.aa, b.aa)
    assert np.allclose(a.xf, b.xf)
    assert np.allclose(a.yf, b.yf)


def test_grad2_table_unknown_name():
    with pytest.raises(ValueError):
        grad2_table("hex6")
