"""
Numeric backends for the ramp generators.

Every profile performs its arithmetic through a ``Numeric`` context instead of
Python operators, so the same algorithm runs unchanged on floats, numpy
scalars of a chosen width, or binary fixed-point values. The precision of the
backend directly controls how closely the generated ramp follows the target
acceleration.
"""
import math
import re
from abc import ABC, abstractmethod

import numpy as np


class Numeric(ABC):
    """Arithmetic context used by the motion profiles."""

    name = "numeric"

    @abstractmethod
    def coerce(self, value):
        """Convert a Python number into this representation."""

    @abstractmethod
    def to_float(self, value) -> float:
        pass

    @abstractmethod
    def add(self, a, b):
        pass

    @abstractmethod
    def sub(self, a, b):
        pass

    @abstractmethod
    def mul(self, a, b):
        pass

    @abstractmethod
    def div(self, a, b):
        pass

    @abstractmethod
    def sqrt(self, a):
        pass

    @abstractmethod
    def ceil(self, a) -> int:
        """Round up to the next integer and return it as a Python int."""

    def zero(self):
        return self.coerce(0)

    def one(self):
        return self.coerce(1)

    def recip(self, a):
        return self.div(self.one(), a)

    def lt(self, a, b) -> bool:
        return a < b

    def le(self, a, b) -> bool:
        return a <= b

    def min(self, a, b):
        return b if self.lt(b, a) else a

    def max(self, a, b):
        return b if self.lt(a, b) else a

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class FloatNumeric(Numeric):
    """Plain Python floats (IEEE double)."""

    name = "float"

    def coerce(self, value):
        return float(value)

    def to_float(self, value) -> float:
        return float(value)

    def add(self, a, b):
        return a + b

    def sub(self, a, b):
        return a - b

    def mul(self, a, b):
        return a * b

    def div(self, a, b):
        return a / b

    def sqrt(self, a):
        return math.sqrt(a)

    def ceil(self, a) -> int:
        return math.ceil(a)


class NumpyNumeric(Numeric):
    """numpy floating-point scalars of a fixed width (float32, float64)."""

    def __init__(self, dtype=np.float32):
        self.dtype = np.dtype(dtype).type
        if not issubclass(self.dtype, np.floating):
            raise ValueError(f"NumpyNumeric needs a floating dtype, got {np.dtype(dtype).name}")
        self.name = np.dtype(dtype).name

    def coerce(self, value):
        return self.dtype(value)

    def to_float(self, value) -> float:
        return float(value)

    def add(self, a, b):
        return self.dtype(a + b)

    def sub(self, a, b):
        return self.dtype(a - b)

    def mul(self, a, b):
        return self.dtype(a * b)

    def div(self, a, b):
        if b == 0:
            raise ZeroDivisionError("division by zero")
        return self.dtype(a / b)

    def sqrt(self, a):
        return self.dtype(np.sqrt(a))

    def ceil(self, a) -> int:
        return int(np.ceil(a))


class FixedNumeric(Numeric):
    """
    Binary fixed point in Q format.

    Values are raw Python ints holding ``real_value * 2**frac_bits``. The word
    is ``int_bits + frac_bits`` wide; results outside it raise OverflowError
    instead of wrapping. Results of mul/div/sqrt truncate toward -inf.
    """

    def __init__(self, frac_bits: int = 32, int_bits: int = 32, signed: bool = False):
        if frac_bits < 1 or int_bits < 1:
            raise ValueError("fixed-point formats need at least one integer and one fractional bit")
        self.frac_bits = frac_bits
        self.int_bits = int_bits
        self.signed = signed
        word = int_bits + frac_bits
        if signed:
            self._raw_min = -(1 << (word - 1))
            self._raw_max = (1 << (word - 1)) - 1
        else:
            self._raw_min = 0
            self._raw_max = (1 << word) - 1
        self.name = f"{'' if signed else 'u'}fixed{int_bits}.{frac_bits}"

    def _check(self, raw: int) -> int:
        if raw < self._raw_min or raw > self._raw_max:
            raise OverflowError(
                f"{self.name}: value {raw / (1 << self.frac_bits)} out of range"
            )
        return raw

    @property
    def resolution(self) -> float:
        return 1.0 / (1 << self.frac_bits)

    def coerce(self, value):
        return self._check(math.floor(value * (1 << self.frac_bits)))

    def to_float(self, value) -> float:
        return value / (1 << self.frac_bits)

    def zero(self):
        return 0

    def one(self):
        return self._check(1 << self.frac_bits)

    def add(self, a, b):
        return self._check(a + b)

    def sub(self, a, b):
        return self._check(a - b)

    def mul(self, a, b):
        return self._check((a * b) >> self.frac_bits)

    def div(self, a, b):
        if b == 0:
            raise ZeroDivisionError("division by zero")
        return self._check((a << self.frac_bits) // b)

    def sqrt(self, a):
        if a < 0:
            raise ValueError(f"{self.name}: square root of a negative value")
        return math.isqrt(a << self.frac_bits)

    def ceil(self, a) -> int:
        # -(-a >> n) rounds up for both signs
        return -((-a) >> self.frac_bits)


_FIXED_NAME = re.compile(r"^(u?)fixed(\d+)\.(\d+)$")


def get_numeric(name: str) -> Numeric:
    """
    Build a numeric backend from its configuration name.

    Accepted names: ``float``, ``float32``, ``float64``, and fixed-point
    formats written ``ufixed<I>.<F>`` (unsigned) or ``fixed<I>.<F>`` (signed),
    e.g. ``ufixed32.32``.
    """
    key = name.strip().lower()
    if key == "float":
        return FloatNumeric()
    if key in ("float32", "float64"):
        return NumpyNumeric(key)
    match = _FIXED_NAME.match(key)
    if match:
        unsigned, int_bits, frac_bits = match.groups()
        return FixedNumeric(frac_bits=int(frac_bits), int_bits=int(int_bits), signed=not unsigned)
    raise ValueError(f"Unknown numeric backend: {name!r}")
