from starsim.utils import try_float, try_positive_int
from starsim.vector_utils import as_vec2, clamp, vec_add, vec_len, vec_scale, vec_sub


def test_try_float():
    assert try_float("86400") == 86400.0
    assert try_float("day") is None
    assert try_float(None) is None


def test_try_positive_int():
    assert try_positive_int(1000) == 1000
    assert try_positive_int("12") == 12
    assert try_positive_int(0) is None
    assert try_positive_int("many") is None


def test_vector_helpers():
    assert vec_add((1.0, 2.0), (3.0, 4.0)) == (4.0, 6.0)
    assert vec_sub((1.0, 2.0), (3.0, 4.0)) == (-2.0, -2.0)
    assert vec_scale((1.0, -2.0), 3.0) == (3.0, -6.0)
    assert vec_len((3.0, 4.0)) == 5.0
    assert clamp(5, 0, 3) == 3
    assert as_vec2([1, 2]) == (1.0, 2.0)
