from decimal import Decimal, InvalidOperation


def parse_decimal(value):
    """Parse a decimal string from config without going through float."""
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"invalid decimal value: {value!r}")

    if not result.is_finite():
        raise ValueError(f"decimal value must be finite: {value!r}")
    return result


def parse_hex_quantity(value) -> int:
    """Parse a JSON-RPC hex quantity such as "0x1bc16d674ec80000"."""
    if not isinstance(value, str) or not value.lower().startswith("0x"):
        raise ValueError(f"not a hex quantity: {value!r}")
    try:
        return int(value[2:], 16)
    except ValueError:
        raise ValueError(f"not a hex quantity: {value!r}")


def to_decimal_unit(balance: int, decimals: int) -> Decimal:
    """Convert a smallest-unit balance into display units.

    The result is exact: the integer digits are kept as they are and only the
    exponent is shifted, so balances far beyond 64 bits lose nothing.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    if balance == 0:
        return Decimal(0)

    sign, digits, exponent = Decimal(balance).as_tuple()
    exponent -= decimals

    # strip fractional trailing zeros, "0.500000000000000000" -> "0.5"
    digits = list(digits)
    while exponent < 0 and len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1

    return Decimal((sign, tuple(digits), exponent))


def exceeds_threshold(balance: Decimal, threshold: Decimal) -> bool:
    """True when the balance is strictly below the threshold."""
    return balance < threshold
