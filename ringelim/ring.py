"""Euclidean rings used as coefficient domains for elimination.

A ring object carries all arithmetic; matrix entries are plain values of
the ring's element type (``int``, ``Fraction``, sympy ``GaussianInteger``,
sympy ``Poly``). The eliminators only ever talk to entries through the
methods below, so adding a ring means subclassing ``EuclideanRing``.
"""

from fractions import Fraction

import sympy as sp
from sympy.polys.domains.gaussiandomains import GaussianInteger

from .errors import PreconditionError, RingContractError


class EuclideanRing:
    """Operation contract for a Euclidean ring.

    Subclasses must provide ``coerce``, ``degree`` and, unless every nonzero
    element is already normalized, ``normalizing_unit``. The remaining
    operations have generic defaults built on Python operators and
    ``divmod``.
    """

    name = "R"

    def __repr__(self):
        return self.name

    def __eq__(self, other):
        return type(self) is type(other) and self.name == other.name

    def __hash__(self):
        return hash((type(self).__name__, self.name))

    @property
    def zero(self):
        return self.coerce(0)

    @property
    def one(self):
        return self.coerce(1)

    def coerce(self, x):
        raise NotImplementedError

    def add(self, a, b):
        return a + b

    def sub(self, a, b):
        return a - b

    def neg(self, a):
        return -a

    def mul(self, a, b):
        return a * b

    def is_zero(self, a):
        return a == self.zero

    def is_one(self, a):
        return a == self.one

    def divmod(self, a, b):
        """Euclidean division: ``a = q*b + r`` with ``degree(r) < degree(b)``."""
        if self.is_zero(b):
            raise RingContractError(
                f"Division by zero in {self.name}: {a} / {b}", (a, b)
            )
        return divmod(a, b)

    def quo(self, a, b):
        return self.divmod(a, b)[0]

    def exact_div(self, a, b):
        q, r = self.divmod(a, b)
        if not self.is_zero(r):
            raise RingContractError(
                f"Exact division {a}/{b} impossible in {self.name}", (a, b)
            )
        return q

    def divides(self, a, b) -> bool:
        """True if ``a`` divides ``b``."""
        if self.is_zero(a):
            return self.is_zero(b)
        return self.is_zero(self.divmod(b, a)[1])

    def degree(self, a) -> int:
        raise NotImplementedError

    def normalizing_unit(self, a):
        return self.one

    def is_normalized(self, a) -> bool:
        return self.is_one(self.normalizing_unit(a))

    def normalize(self, a):
        return self.mul(self.normalizing_unit(a), a)

    def is_unit(self, a) -> bool:
        return not self.is_zero(a) and self.is_one(self.normalize(a))

    def inverse(self, a):
        if not self.is_unit(a):
            raise RingContractError(
                f"{a} is not a unit in {self.name}", (a,)
            )
        return self.exact_div(self.one, a)

    def gcdex(self, a, b):
        """
        Extended Euclidean algorithm.

        Returns (p, q, d) such that p*a + q*b == d, where d is the
        normalized gcd of a and b.
        """
        r0, r1 = a, b
        s0, s1 = self.one, self.zero
        t0, t1 = self.zero, self.one

        while not self.is_zero(r1):
            q, r = self.divmod(r0, r1)
            r0, r1 = r1, r
            s0, s1 = s1, self.sub(s0, self.mul(q, s1))
            t0, t1 = t1, self.sub(t0, self.mul(q, t1))

        u = self.normalizing_unit(r0)
        return self.mul(u, s0), self.mul(u, t0), self.mul(u, r0)


class IntegerRing(EuclideanRing):
    """The integers, with ``abs`` as degree and positive normal forms."""

    name = "ZZ"

    def coerce(self, x):
        if isinstance(x, int):
            return x
        value = int(x)
        if value != x:
            raise PreconditionError(f"{x!r} is not an integer")
        return value

    def is_zero(self, a):
        return a == 0

    def is_one(self, a):
        return a == 1

    def degree(self, a):
        return abs(a)

    def normalizing_unit(self, a):
        return -1 if a < 0 else 1


class RationalField(EuclideanRing):
    """The rationals as a (trivially Euclidean) field."""

    name = "QQ"

    def coerce(self, x):
        if isinstance(x, Fraction):
            return x
        if isinstance(x, sp.Rational):
            return Fraction(int(x.p), int(x.q))
        return Fraction(x)

    def degree(self, a):
        return 0

    def divmod(self, a, b):
        if b == 0:
            raise RingContractError(f"Division by zero in QQ: {a} / {b}", (a, b))
        return a / b, Fraction(0)

    def normalizing_unit(self, a):
        return Fraction(1) if a == 0 else 1 / a


class GaussianIntegerRing(EuclideanRing):
    """
    The Gaussian integers ZZ[i], backed by sympy's GaussianInteger.

    Degree is the norm x^2 + y^2; normalized elements lie in the
    quadrant x > 0, y >= 0.
    """

    name = "ZZ_I"

    def coerce(self, x):
        if isinstance(x, GaussianInteger):
            return x
        if isinstance(x, tuple):
            re, im = x
        elif isinstance(x, complex):
            re, im = x.real, x.imag
        else:
            re, im = x, 0
        if int(re) != re or int(im) != im:
            raise PreconditionError(f"{x!r} is not a Gaussian integer")
        return GaussianInteger(int(re), int(im))

    def degree(self, a):
        return int(a.x) ** 2 + int(a.y) ** 2

    def normalizing_unit(self, a):
        x, y = a.x, a.y
        if (x > 0 and y >= 0) or (x == 0 and y == 0):
            return self.one
        if x <= 0 and y > 0:
            return GaussianInteger(0, -1)
        if x < 0 and y <= 0:
            return GaussianInteger(-1, 0)
        return GaussianInteger(0, 1)


class PolynomialRing(EuclideanRing):
    """Univariate polynomials over QQ, backed by sympy ``Poly``."""

    def __init__(self, symbol="x"):
        self.symbol = sp.Symbol(symbol) if isinstance(symbol, str) else symbol
        self.name = f"QQ[{self.symbol}]"

    def coerce(self, x):
        if isinstance(x, sp.Poly):
            if x.gens == (self.symbol,) and x.get_domain() == sp.QQ:
                return x
            x = x.as_expr()
        return sp.Poly(x, self.symbol, domain=sp.QQ)

    def is_zero(self, a):
        return a.is_zero

    def degree(self, a):
        if a.is_zero:
            return 0
        return int(a.degree())

    def divmod(self, a, b):
        if b.is_zero:
            raise RingContractError(
                f"Division by zero in {self.name}: {a} / {b}", (a, b)
            )
        return a.div(b)

    def normalizing_unit(self, a):
        if a.is_zero:
            return self.one
        return self.coerce(1 / a.LC())

    def gcdex(self, a, b):
        if a.is_zero and b.is_zero:
            return self.one, self.zero, self.zero
        # sympy returns a monic gcd, which is our normal form
        p, q, d = a.gcdex(b)
        return p, q, d


ZZ = IntegerRing()
QQ = RationalField()
ZZ_I = GaussianIntegerRing()
