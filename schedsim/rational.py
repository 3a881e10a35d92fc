"""Exact rational arithmetic for scheduling computations.

Periods, deadlines and execution times are frequently non-integral (``1/2``,
``2/3``), and comparing them as floats makes release and deadline instants
drift apart. Every time value in the library is therefore a ``Rational``:
an immutable numerator/denominator pair that is reduced to lowest terms on
construction.

Construction forms:
    - ``Rational(n, d)`` from two integers (reduced unless ``reduce=False``);
    - ``Rational.parse("3")``, ``Rational.parse("0.25")`` or
      ``Rational.parse("1/2")`` from a string;
    - ``Rational.from_float(0.5)`` from a float, approximated by scaling by
      powers of ten until the fractional remainder is below ``1e-7``. This is
      the only inexact path into the library.

``as_rational`` accepts any of the above (or an existing ``Rational``) and is
what the rest of the package uses at its API boundaries.
"""

import math
from dataclasses import InitVar, dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple, Union

from schedsim.errors import DivisionByZero, MalformedRationalString, TypeMismatch

FLOAT_TOLERANCE = 1e-7


@dataclass(frozen=True, eq=False)
class Rational:
    """An exact fraction ``n/d``.

    Attributes:
        n: Numerator. Carries the sign of the value.
        d: Denominator. Never zero, positive once reduced.
    """
    n: int
    d: int = 1
    reduce: InitVar[bool] = True

    def __post_init__(self, reduce: bool) -> None:
        """Validate the pair and bring it to lowest terms."""
        if not _is_int(self.n) or not _is_int(self.d):
            raise TypeMismatch(
                f"Rational expects integer numerator and denominator, "
                f"got {type(self.n).__name__} and {type(self.d).__name__}"
            )
        if self.d == 0:
            raise DivisionByZero()
        if not reduce:
            return

        n, d = self.n, self.d
        if d < 0:
            n, d = -n, -d
        if n == 0:
            d = 1
        else:
            divisor = math.gcd(n, d)
            n, d = n // divisor, d // divisor
        object.__setattr__(self, 'n', n)
        object.__setattr__(self, 'd', d)

    # Construction helpers

    @classmethod
    def parse(cls, text: str) -> "Rational":
        """Parse ``"a"``, ``"a.b"`` or ``"a/b"`` into a Rational.

        Both sides of a ``/`` may themselves be decimal numbers.

        Raises:
            MalformedRationalString: If the text holds no number and no ``/``,
                or either side of the ``/`` is not a number.
            DivisionByZero: If the denominator parses as zero.
        """
        if not isinstance(text, str):
            raise TypeMismatch(f"String expected, got {type(text).__name__}")

        value = _parse_number(text)
        if value is not None:
            return value

        numerator, slash, denominator = text.partition("/")
        if not slash:
            raise MalformedRationalString(
                f'Tried to load rational from string "{text}", but it was malformed.'
            )
        top = _parse_number(numerator)
        bottom = _parse_number(denominator)
        if top is None or bottom is None:
            raise MalformedRationalString(
                f'Tried to load rational from string "{text}", but it was malformed.'
            )
        return top / bottom

    @classmethod
    def from_float(cls, value: float) -> "Rational":
        """Approximate a float by a decimal fraction within ``1e-7``.

        Raises:
            ValueError: If the value is NaN or infinite.
        """
        if not math.isfinite(value):
            raise ValueError(f"Cannot convert {value!r} to a rational")
        scaled = float(value)
        scale = 1
        while scaled % 1 > FLOAT_TOLERANCE:
            scaled *= 10
            scale *= 10
        return cls(round(scaled), scale)

    def simplify(self) -> "Rational":
        """Return this value in lowest terms."""
        return Rational(self.n, self.d)

    # Arithmetic

    def __add__(self, other: "RationalLike") -> "Rational":
        a, b, d = self._like_denominators(_coerce(other))
        return Rational(a + b, d)

    def __radd__(self, other: "RationalLike") -> "Rational":
        return _coerce(other) + self

    def __sub__(self, other: "RationalLike") -> "Rational":
        a, b, d = self._like_denominators(_coerce(other))
        return Rational(a - b, d)

    def __rsub__(self, other: "RationalLike") -> "Rational":
        return _coerce(other) - self

    def __mul__(self, other: "RationalLike") -> "Rational":
        other = _coerce(other)
        return Rational(self.n * other.n, self.d * other.d)

    def __rmul__(self, other: "RationalLike") -> "Rational":
        return _coerce(other) * self

    def __truediv__(self, other: "RationalLike") -> "Rational":
        other = _coerce(other)
        if other.n == 0:
            raise DivisionByZero()
        return Rational(self.n * other.d, self.d * other.n)

    def __rtruediv__(self, other: "RationalLike") -> "Rational":
        return _coerce(other) / self

    def __mod__(self, other: "RationalLike") -> "Rational":
        """Modulo over a shared denominator.

        Both operands are brought to the least common denominator and the
        result is the integer modulo of the numerators. The sign follows the
        divisor, so ``-3/2 % 3 == 3/2``.
        """
        other = _coerce(other)
        if other.n == 0:
            raise DivisionByZero()
        a, b, d = self._like_denominators(other)
        return Rational(a % b, d)

    def __rmod__(self, other: "RationalLike") -> "Rational":
        return _coerce(other) % self

    def __pow__(self, other: "RationalLike") -> "Rational":
        """Raise to a power.

        Integer exponents are exact. For a non-integer exponent the numerator
        and denominator are raised independently (``n ** e.n`` over
        ``d ** e.d``), which is not the mathematical power; do not rely on it.
        """
        exponent = _coerce(other).simplify()
        n, d = self._normalized()
        if exponent.d == 1:
            k = exponent.n
            if k >= 0:
                return Rational(n ** k, d ** k)
            if n == 0:
                raise DivisionByZero()
            return Rational(d ** -k, n ** -k)
        if exponent.n >= 0:
            return Rational(n ** exponent.n, d ** exponent.d)
        if n == 0:
            raise DivisionByZero()
        return Rational(1, n ** -exponent.n * d ** exponent.d)

    def __neg__(self) -> "Rational":
        return Rational(-self.n, self.d)

    def __pos__(self) -> "Rational":
        return self

    def __abs__(self) -> "Rational":
        return Rational(abs(self.n), abs(self.d))

    # Comparison

    def __eq__(self, other: object) -> bool:
        """Compare numerator/denominator pairs.

        Two values denoting the same ratio are only equal when both are in
        lowest terms, which every constructor path guarantees unless
        ``reduce=False`` was requested.
        """
        try:
            other = _coerce(other)
        except (TypeMismatch, ValueError):
            return NotImplemented
        return self.n == other.n and self.d == other.d

    def __hash__(self) -> int:
        if self.d == 1:
            return hash(self.n)
        return hash((self.n, self.d))

    def __lt__(self, other: "RationalLike") -> bool:
        return self._compare(_coerce(other)) < 0

    def __le__(self, other: "RationalLike") -> bool:
        return self._compare(_coerce(other)) <= 0

    def __gt__(self, other: "RationalLike") -> bool:
        return self._compare(_coerce(other)) > 0

    def __ge__(self, other: "RationalLike") -> bool:
        return self._compare(_coerce(other)) >= 0

    # Conversion

    def __float__(self) -> float:
        return self.n / self.d

    def __floor__(self) -> int:
        n, d = self._normalized()
        return n // d

    def __bool__(self) -> bool:
        return self.n != 0

    @property
    def is_integer(self) -> bool:
        """Whether the value is a whole number."""
        n, d = self._normalized()
        return n % d == 0

    def __str__(self) -> str:
        if self.d == 1 or self.n == 0:
            return str(self.n)
        return f"{self.n}/{self.d}"

    def __repr__(self) -> str:
        return f"Rational({self.n}, {self.d})"

    # Internals

    def _normalized(self) -> Tuple[int, int]:
        """Return ``(n, d)`` with a positive denominator, without reducing."""
        if self.d < 0:
            return -self.n, -self.d
        return self.n, self.d

    def _like_denominators(self, other: "Rational") -> Tuple[int, int, int]:
        """Rewrite both operands over the least common denominator."""
        a_n, a_d = self._normalized()
        b_n, b_d = other._normalized()
        d = a_d * b_d // math.gcd(a_d, b_d)
        return a_n * (d // a_d), b_n * (d // b_d), d

    def _compare(self, other: "Rational") -> int:
        a, b, _ = self._like_denominators(other)
        return (a > b) - (a < b)


Numeric = Union[int, Rational]
RationalLike = Union[int, float, str, Rational]


def as_rational(value: RationalLike) -> Rational:
    """Normalize any accepted numeric input to a ``Rational``.

    Args:
        value: An int, a float, a numeric string (``"3"``, ``"0.5"``,
            ``"1/2"``) or a Rational.

    Raises:
        TypeMismatch: If the value is of any other type.
    """
    if isinstance(value, Rational):
        return value
    if isinstance(value, str):
        return Rational.parse(value)
    return _coerce(value)


def lcm(*values: RationalLike) -> Rational:
    """Least common multiple of positive rationals.

    For reduced fractions ``lcm(p/q, r/s) == lcm(p, r) / gcd(q, s)``, which is
    the smallest value that is an integer multiple of every argument.
    Returns zero for no arguments.
    """
    if not values:
        return ZERO
    result = None
    for value in map(as_rational, values):
        if value <= 0:
            raise ValueError(f"LCM is only defined for positive values (got: {value})")
        if result is None:
            result = value
            continue
        numerator = result.n * value.n // math.gcd(result.n, value.n)
        result = Rational(numerator, math.gcd(result.d, value.d))
    return result


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce(value: object) -> Rational:
    if isinstance(value, Rational):
        return value
    if _is_int(value):
        return Rational(value)
    if isinstance(value, float):
        return Rational.from_float(value)
    raise TypeMismatch(f"Rational or number expected, got {type(value).__name__}")


def _parse_number(text: str) -> Optional[Rational]:
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    n, d = value.as_integer_ratio()
    return Rational(n, d)


ZERO = Rational(0)
ONE = Rational(1)
