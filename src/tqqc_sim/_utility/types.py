"""
Small value types shared by the circuit model, the simulator and the optimiser.

Counts are plain dictionaries mapping MSB-first bitstrings to integer counts.
"""

from enum import Enum

from .errors import InvalidProbability, InvalidBitstring, InvalidBasis


class Probability(object):
    """ Float validated to lie in [0, 1].

    Args:
        value (float): The probability.

    Raises:
        InvalidProbability: If the value lies outside [0, 1].
    """

    __slots__ = ("_value",)

    def __init__(self, value: float):
        if not 0.0 <= value <= 1.0:
            raise InvalidProbability(value)
        self._value = float(value)

    @property
    def value(self) -> float:
        return self._value

    def complement(self) -> float:
        return 1.0 - self._value

    def __float__(self):
        return self._value

    def __eq__(self, other):
        if isinstance(other, Probability):
            return self._value == other._value
        return NotImplemented

    def __hash__(self):
        return hash(self._value)

    def __str__(self):
        return f"{self._value:.6f}"

    def __repr__(self):
        return f"Probability({self._value})"


Probability.ZERO = Probability(0.0)
Probability.ONE = Probability(1.0)
Probability.HALF = Probability(0.5)


class Bitstring(object):
    """ Measurement outcome stored as a tuple of bits, most significant bit first.

    Example:
        .. code:: python

            bs = Bitstring.parse("0111")
            bs.popcount()      # 3
            bs.parity()        # True, the parity is odd
            bs.parity_sign()   # -1
            bs.to_int()        # 7
    """

    __slots__ = ("_bits",)

    def __init__(self, bits):
        self._bits = tuple(bool(b) for b in bits)

    @classmethod
    def parse(cls, s: str):
        if any(c not in "01" for c in s):
            raise InvalidBitstring(s)
        return cls(c == "1" for c in s)

    @classmethod
    def zeros(cls, n: int):
        return cls([False] * n)

    def __len__(self):
        return len(self._bits)

    def is_empty(self) -> bool:
        return len(self._bits) == 0

    def popcount(self) -> int:
        return sum(self._bits)

    def parity(self) -> bool:
        """ True for odd parity. """
        return self.popcount() % 2 == 1

    def parity_sign(self) -> int:
        return -1 if self.parity() else 1

    def get(self, index: int):
        """ Bit at the position counted from the left, None when out of range. """
        if 0 <= index < len(self._bits):
            return self._bits[index]
        return None

    def to_int(self) -> int:
        value = 0
        for b in self._bits:
            value = (value << 1) | int(b)
        return value

    def __eq__(self, other):
        if isinstance(other, Bitstring):
            return self._bits == other._bits
        return NotImplemented

    def __hash__(self):
        return hash(self._bits)

    def __str__(self):
        return "".join("1" if b else "0" for b in self._bits)

    def __repr__(self):
        return f"Bitstring('{self}')"


class Basis(Enum):
    """ Single-qubit measurement basis. """

    X = "X"
    Y = "Y"
    Z = "Z"

    @classmethod
    def from_char(cls, c: str):
        try:
            return cls(c.upper())
        except ValueError:
            raise InvalidBasis(c) from None

    def to_char(self) -> str:
        return self.value

    def __str__(self):
        return self.value


class BasisString(object):
    """ Per-qubit measurement bases, e.g. "XXYZ".

    Args:
        bases (list[Basis]): One basis per qubit, index i belongs to qubit i.
    """

    def __init__(self, bases):
        self._bases = tuple(bases)

    @classmethod
    def from_str(cls, s: str):
        return cls(Basis.from_char(c) for c in s)

    @classmethod
    def uniform(cls, basis: Basis, n: int):
        return cls([basis] * n)

    @classmethod
    def all_x(cls, n: int):
        return cls.uniform(Basis.X, n)

    @classmethod
    def all_y(cls, n: int):
        return cls.uniform(Basis.Y, n)

    @classmethod
    def all_z(cls, n: int):
        return cls.uniform(Basis.Z, n)

    def __len__(self):
        return len(self._bases)

    def is_empty(self) -> bool:
        return len(self._bases) == 0

    def get(self, index: int):
        if 0 <= index < len(self._bases):
            return self._bases[index]
        return None

    def __iter__(self):
        return iter(self._bases)

    def __eq__(self, other):
        if isinstance(other, BasisString):
            return self._bases == other._bases
        return NotImplemented

    def __hash__(self):
        return hash(self._bases)

    def __str__(self):
        return "".join(b.to_char() for b in self._bases)

    def __repr__(self):
        return f"BasisString('{self}')"
