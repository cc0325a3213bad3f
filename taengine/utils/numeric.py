"""Numeric backends for consistent Decimal/float handling.

Every value produced by a bar, series or indicator belongs to one backend:
``decimal.Decimal`` (exact mode, the default) or ``float`` (double mode).
A ``NumFactory`` is the single conversion seam between native numbers and
the backend a series was configured with.
"""

import math
from abc import ABC, abstractmethod
from decimal import Decimal, getcontext

# Set precision for financial calculations
getcontext().prec = 28


def D(x) -> Decimal:
    """
    Robust Decimal conversion for ints/floats/strings/Decimals.

    Avoids binary floating-point artifacts by converting floats to strings first.

    Args:
        x: Value to convert (int, float, str, or Decimal)

    Returns:
        Decimal: Converted value

    Raises:
        TypeError: If type is not supported
    """
    if isinstance(x, Decimal):
        return x
    if isinstance(x, bool):
        raise TypeError(f"Unsupported numeric type: {type(x)}")
    if isinstance(x, int):
        return Decimal(x)
    if isinstance(x, str):
        return Decimal(x)
    if isinstance(x, float):
        # Convert float to string first to avoid binary FP artifacts
        return Decimal(str(x))
    raise TypeError(f"Unsupported numeric type: {type(x)}")


class NumFactory(ABC):
    """Builds numbers of one backend type."""

    num_type = None
    name = ""

    @abstractmethod
    def num_of(self, value):
        """Convert a native number into this backend."""

    def __call__(self, value):
        return self.num_of(value)

    def zero(self):
        return self.num_of(0)

    def one(self):
        return self.num_of(1)

    def hundred(self):
        return self.num_of(100)

    def nan(self):
        return self.num_of(float("nan"))

    def produces(self, value) -> bool:
        """True if ``value`` already belongs to this backend."""
        return isinstance(value, self.num_type)

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class DecimalNumFactory(NumFactory):
    """Exact (arbitrary precision) backend."""

    num_type = Decimal
    name = "decimal"

    def num_of(self, value) -> Decimal:
        return D(value)


class DoubleNumFactory(NumFactory):
    """Fixed double precision backend."""

    num_type = float
    name = "double"

    def num_of(self, value) -> float:
        if isinstance(value, (int, float, Decimal, str)) and not isinstance(value, bool):
            return float(value)
        raise TypeError(f"Unsupported numeric type: {type(value)}")


DECIMAL = DecimalNumFactory()
DOUBLE = DoubleNumFactory()

_FACTORIES = {DECIMAL.name: DECIMAL, DOUBLE.name: DOUBLE}


def get_factory(name: str) -> NumFactory:
    """Look up a backend by name ("decimal" or "double")."""
    try:
        return _FACTORIES[name]
    except KeyError:
        raise ValueError(f"Unknown numeric backend: {name}") from None


def factory_of(value) -> NumFactory:
    """Backend an existing value belongs to."""
    if isinstance(value, Decimal):
        return DECIMAL
    if isinstance(value, (float, int)) and not isinstance(value, bool):
        return DOUBLE
    raise TypeError(f"Unsupported numeric type: {type(value)}")


def is_nan(value) -> bool:
    if value is None:
        return False
    if isinstance(value, Decimal):
        return value.is_nan()
    return math.isnan(value)


def num_equals(left, right) -> bool:
    """Equality where NaN equals NaN."""
    if left is right:
        return True
    if left is None or right is None:
        return False
    if is_nan(left) or is_nan(right):
        return is_nan(left) and is_nan(right)
    return left == right


def is_positive(value) -> bool:
    return not is_nan(value) and value > 0


def is_negative(value) -> bool:
    return not is_nan(value) and value < 0
