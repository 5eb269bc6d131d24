import sys
from pathlib import Path
sys.path.append(str(Path(__file__).resolve().parents[1] / 'scripts'))

import numpy as np
import pytest
from numeric import FixedNumeric, FloatNumeric, NumpyNumeric, get_numeric


def test_float_backend():
    num = FloatNumeric()
    assert num.recip(num.coerce(4)) == 0.25
    assert num.sqrt(num.coerce(9)) == 3.0
    assert num.ceil(2.01) == 3
    assert isinstance(num.ceil(2.01), int)
    assert num.min(1.0, 2.0) == 1.0
    assert num.max(1.0, 2.0) == 2.0


def test_numpy_backend_keeps_width():
    num = NumpyNumeric(np.float32)
    value = num.mul(num.coerce(1.5), num.coerce(2))
    assert isinstance(value, np.float32)
    assert num.to_float(value) == 3.0
    assert num.name == "float32"
    with pytest.raises(ZeroDivisionError):
        num.div(num.one(), num.zero())


def test_numpy_backend_rejects_integer_dtype():
    with pytest.raises(ValueError):
        NumpyNumeric(np.int32)


def test_fixed_point_arithmetic():
    num = FixedNumeric(frac_bits=16, int_bits=16)
    one_and_half = num.coerce(1.5)
    assert one_and_half == 3 << 15
    assert num.one() == 1 << 16
    assert num.mul(one_and_half, num.coerce(2)) == num.coerce(3)
    assert num.div(num.coerce(3), num.coerce(2)) == one_and_half
    assert num.sqrt(num.coerce(4)) == num.coerce(2)
    assert num.to_float(num.recip(num.coerce(4))) == 0.25
    assert num.ceil(num.coerce(2.25)) == 3
    assert num.ceil(num.coerce(2)) == 2
    assert num.resolution == 2 ** -16


def test_fixed_point_truncates():
    num = FixedNumeric(frac_bits=8, int_bits=8)
    third = num.div(num.one(), num.coerce(3))
    assert third == 85  # floor(256 / 3)
    assert num.to_float(third) < 1 / 3


def test_signed_fixed_point_ceil_of_negative():
    num = FixedNumeric(frac_bits=16, int_bits=16, signed=True)
    assert num.ceil(num.coerce(-2.5)) == -2
    assert num.to_float(num.sub(num.coerce(1), num.coerce(2))) == -1.0


def test_fixed_point_range_errors():
    num = FixedNumeric(frac_bits=16, int_bits=16)
    with pytest.raises(OverflowError):
        num.sub(num.coerce(1), num.coerce(2))
    with pytest.raises(OverflowError):
        num.coerce(70000)
    with pytest.raises(OverflowError):
        num.mul(num.coerce(300), num.coerce(300))
    with pytest.raises(ZeroDivisionError):
        num.div(num.one(), num.zero())


@pytest.mark.parametrize("name, cls", [
    ("float", FloatNumeric),
    ("float32", NumpyNumeric),
    ("Float64", NumpyNumeric),
    ("ufixed32.32", FixedNumeric),
    ("fixed16.16", FixedNumeric),
])
def test_get_numeric(name, cls):
    assert isinstance(get_numeric(name), cls)


def test_get_numeric_fixed_format():
    num = get_numeric("ufixed32.32")
    assert num.name == "ufixed32.32"
    assert num.frac_bits == 32 and num.int_bits == 32 and not num.signed
    assert get_numeric("fixed8.24").signed


def test_get_numeric_unknown():
    with pytest.raises(ValueError):
        get_numeric("decimal")
