import config
from quorum.errors import ParseError

BASE = config.Config.DIGIT_BASE
WIDTH = config.Config.DIGIT_WIDTH


def _trim(groups):
    while len(groups) > 1 and groups[-1] == 0:
        groups.pop()
    return groups


def _compare_magnitude(a, b):
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return -1 if a[i] < b[i] else 1
    return 0


def _add_magnitude(a, b):
    result = []
    carry = 0
    for i in range(max(len(a), len(b))):
        total = carry
        if i < len(a):
            total += a[i]
        if i < len(b):
            total += b[i]
        result.append(total % BASE)
        carry = total // BASE
    if carry:
        result.append(carry)
    return result


def _sub_magnitude(a, b):
    """Subtract magnitudes, |a| must be >= |b|."""
    result = []
    borrow = 0
    for i in range(len(a)):
        diff = a[i] - borrow
        if i < len(b):
            diff -= b[i]
        if diff < 0:
            diff += BASE
            borrow = 1
        else:
            borrow = 0
        result.append(diff)
    return _trim(result)


def _mul_magnitude(a, b):
    """Schoolbook multiplication over digit groups"""
    result = [0] * (len(a) + len(b))
    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        for j, y in enumerate(b):
            current = result[i + j] + x * y + carry
            result[i + j] = current % BASE
            carry = current // BASE
        k = i + len(b)
        while carry:
            current = result[k] + carry
            result[k] = current % BASE
            carry = current // BASE
            k += 1
    return _trim(result)


def _mul_small(a, factor):
    if factor == 0:
        return [0]
    result = []
    carry = 0
    for group in a:
        current = group * factor + carry
        result.append(current % BASE)
        carry = current // BASE
    while carry:
        result.append(carry % BASE)
        carry //= BASE
    return _trim(result)


def _divmod_magnitude(a, b):
    """Long division of magnitudes, one digit group of quotient per step."""
    if _compare_magnitude(a, b) < 0:
        return [0], list(a)

    quotient = [0] * len(a)
    remainder = [0]
    for i in range(len(a) - 1, -1, -1):
        remainder = _trim([a[i]] + remainder)

        # Largest q with b * q <= remainder
        low, high = 0, BASE - 1
        while low < high:
            mid = (low + high + 1) // 2
            if _compare_magnitude(_mul_small(b, mid), remainder) <= 0:
                low = mid
            else:
                high = mid - 1

        if low:
            remainder = _sub_magnitude(remainder, _mul_small(b, low))
        quotient[i] = low
    return _trim(quotient), remainder


def _digit_value(char):
    if "0" <= char <= "9":
        return ord(char) - ord("0")
    if "A" <= char <= "Z":
        return ord(char) - ord("A") + 10
    if "a" <= char <= "z":
        return ord(char) - ord("a") + 10
    return None


def _coerce(value):
    if isinstance(value, BigInt):
        return value
    if isinstance(value, int):
        return BigInt(value)
    return None


class BigInt:
    """
    Exact signed integer of unbounded magnitude.

    Stored as a sign flag plus base 10**9 digit groups, least-significant
    group first. Zero is a single zero group and is never negative.
    """

    __slots__ = ("_groups", "_negative")

    def __init__(self, value=0):
        if isinstance(value, BigInt):
            self._groups = list(value._groups)
            self._negative = value._negative
            return
        if isinstance(value, str):
            parsed = BigInt.from_string(value)
            self._groups = parsed._groups
            self._negative = parsed._negative
            return
        if not isinstance(value, int):
            raise TypeError(f"Cannot build BigInt from {type(value).__name__}")

        self._negative = value < 0
        value = abs(value)
        groups = []
        while value > 0:
            groups.append(value % BASE)
            value //= BASE
        self._groups = groups or [0]

    @classmethod
    def _from_parts(cls, groups, negative):
        result = cls.__new__(cls)
        result._groups = _trim(groups)
        result._negative = negative and result._groups != [0]
        return result

    @classmethod
    def from_string(cls, text: str, radix: int = 10) -> "BigInt":
        """Parse text in the given radix (2-36), with an optional leading '-'."""
        if not isinstance(radix, int) or not config.Config.MIN_RADIX <= radix <= config.Config.MAX_RADIX:
            raise ParseError(f"Radix {radix!r} is outside [{config.Config.MIN_RADIX}, {config.Config.MAX_RADIX}]")

        negative = text.startswith("-")
        digits = text[1:] if negative else text
        if not digits:
            raise ParseError(f"No digits in number string {text!r}")

        groups = [0]
        for char in digits:
            value = _digit_value(char)
            if value is None or value >= radix:
                raise ParseError(f"Invalid character {char!r} for radix {radix} in {text!r}")
            groups = _add_magnitude(_mul_small(groups, radix), [value])
        return cls._from_parts(groups, negative)

    @property
    def digit_groups(self):
        return tuple(self._groups)

    @property
    def is_negative(self):
        return self._negative

    def is_zero(self):
        return self._groups == [0]

    # Arithmetic

    def __add__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if self._negative == other._negative:
            return BigInt._from_parts(_add_magnitude(self._groups, other._groups), self._negative)

        order = _compare_magnitude(self._groups, other._groups)
        if order == 0:
            return BigInt(0)
        if order > 0:
            return BigInt._from_parts(_sub_magnitude(self._groups, other._groups), self._negative)
        return BigInt._from_parts(_sub_magnitude(other._groups, self._groups), other._negative)

    __radd__ = __add__

    def __sub__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other + (-self)

    def __mul__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInt._from_parts(
            _mul_magnitude(self._groups, other._groups),
            self._negative != other._negative,
        )

    __rmul__ = __mul__

    def __divmod__(self, other):
        """Floor division and remainder for a positive divisor; remainder is in [0, divisor)."""
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if other.is_zero():
            raise ZeroDivisionError("BigInt division by zero")
        if other._negative:
            raise ValueError("BigInt division requires a positive divisor")

        quotient, remainder = _divmod_magnitude(self._groups, other._groups)
        quotient = BigInt._from_parts(quotient, False)
        remainder = BigInt._from_parts(remainder, False)
        if not self._negative:
            return quotient, remainder
        if remainder.is_zero():
            return -quotient, remainder
        return -(quotient + 1), other - remainder

    def __mod__(self, other):
        result = self.__divmod__(other)
        if result is NotImplemented:
            return result
        return result[1]

    def __floordiv__(self, other):
        result = self.__divmod__(other)
        if result is NotImplemented:
            return result
        return result[0]

    def __neg__(self):
        return BigInt._from_parts(list(self._groups), not self._negative)

    def __abs__(self):
        return BigInt._from_parts(list(self._groups), False)

    # Comparison

    def _compare(self, other):
        if self._negative != other._negative:
            return -1 if self._negative else 1
        order = _compare_magnitude(self._groups, other._groups)
        return -order if self._negative else order

    def __eq__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._negative == other._negative and self._groups == other._groups

    def __lt__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) >= 0

    def __hash__(self):
        return hash(int(self))

    # Conversion

    def __bool__(self):
        return not self.is_zero()

    def __int__(self):
        value = 0
        for group in reversed(self._groups):
            value = value * BASE + group
        return -value if self._negative else value

    def __str__(self):
        head = str(self._groups[-1])
        body = "".join(str(group).zfill(WIDTH) for group in reversed(self._groups[:-1]))
        return ("-" if self._negative else "") + head + body

    def __repr__(self):
        return f"BigInt('{self}')"
