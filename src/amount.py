import re
from dataclasses import dataclass

MAX_DECIMAL_PLACES = 4
SCALE = 10 ** MAX_DECIMAL_PLACES
MAX_UNITS = 2 ** 64 - 1

_DIGITS = re.compile(r"[0-9]+")
# Longer whole parts cannot fit in MAX_UNITS once scaled
_MAX_WHOLE_DIGITS = len(str(MAX_UNITS // SCALE))


class AmountError(Exception):
    """Base class for fixed-point amount failures."""


class AmountParseError(AmountError, ValueError):
    pass


class MalformedAmountError(AmountParseError):
    pass


class TooManyDecimalPlacesError(AmountParseError):
    pass


class AmountOverflowError(AmountError, OverflowError):
    pass


class AmountUnderflowError(AmountError, ArithmeticError):
    pass


@dataclass(frozen=True, order=True)
class Amount:
    """
    Exact non-negative monetary value stored as a count of 1/10,000 units.

    Arithmetic is checked against the unsigned 64-bit range: ``+`` raises
    AmountOverflowError and ``-`` raises AmountUnderflowError instead of
    wrapping.
    """

    units: int = 0

    def __post_init__(self):
        if self.units < 0:
            raise AmountUnderflowError(f"Negative amount: {self.units} units")
        if self.units > MAX_UNITS:
            raise AmountOverflowError(f"Amount exceeds {MAX_UNITS} units: {self.units}")

    @classmethod
    def parse(cls, text: str) -> "Amount":
        """
        Parse a decimal string with up to 4 fractional digits.

        "1.1" is 1.1000; "69" is 69.0000. Signs, exponents, a missing
        integer part and a trailing "." are all malformed.
        """
        whole_str, separator, fraction_str = text.partition(".")

        if separator and len(fraction_str) > MAX_DECIMAL_PLACES:
            raise TooManyDecimalPlacesError(
                f"Too many decimal places: {len(fraction_str)}. Max {MAX_DECIMAL_PLACES}"
            )
        if not _DIGITS.fullmatch(whole_str):
            raise MalformedAmountError(f"Malformed amount: {text!r}")
        if separator and not _DIGITS.fullmatch(fraction_str):
            raise MalformedAmountError(f"Malformed amount: {text!r}")

        whole_str = whole_str.lstrip("0") or "0"
        if len(whole_str) > _MAX_WHOLE_DIGITS:
            raise AmountOverflowError(f"Overflow error: whole part has {len(whole_str)} digits")

        whole_units = int(whole_str) * SCALE
        if whole_units > MAX_UNITS:
            raise AmountOverflowError(f"Overflow error: whole {whole_str} * {SCALE}")

        fraction_units = 0
        if separator:
            fraction_units = int(fraction_str) * 10 ** (MAX_DECIMAL_PLACES - len(fraction_str))

        units = whole_units + fraction_units
        if units > MAX_UNITS:
            raise AmountOverflowError(f"Overflow error: whole {whole_units} + decimal {fraction_units}")
        return cls(units)

    def __add__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        result = self.units + other.units
        if result > MAX_UNITS:
            raise AmountOverflowError(f"Overflow error: {self} + {other}")
        return Amount(result)

    def __sub__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        result = self.units - other.units
        if result < 0:
            raise AmountUnderflowError(f"Underflow error: {self} - {other}")
        return Amount(result)

    def __str__(self) -> str:
        whole, fraction = divmod(self.units, SCALE)
        return f"{whole}.{fraction:0{MAX_DECIMAL_PLACES}d}"

    def __repr__(self) -> str:
        return f"Amount('{self}')"


ZERO = Amount(0)
