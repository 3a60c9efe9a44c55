"""Positional numeral codec over an arbitrary alphabet ("universe").

The base is ``len(universe)`` and the character at index ``i`` is the digit ``i``.
"""

from shortlink.errors import MalformedError


def _base(universe: str) -> int:
    if len(universe) < 2:
        raise ValueError("Universe must contain at least 2 characters")
    return len(universe)


def encode(value: int, universe: str) -> str:
    """Encode a non-negative integer, most significant digit first.

    Zero encodes to the zero digit ``universe[0]``, never to an empty string.
    """
    base = _base(universe)
    if value < 0:
        raise ValueError(f"Cannot encode negative value {value}")
    if value == 0:
        return universe[0]

    digits: list[str] = []
    while value > 0:
        value, digit = divmod(value, base)
        digits.append(universe[digit])
    return "".join(reversed(digits))


def decode(code: str, universe: str) -> int:
    """Decode a code produced by ``encode``.

    Raises:
        MalformedError: If the code is empty or contains a character outside the universe
    """
    base = _base(universe)
    if not code:
        raise MalformedError("Shortcode is empty")

    result = 0
    for char in code:
        digit = universe.find(char)
        if digit < 0:
            raise MalformedError(f"Invalid character {char!r} in shortcode")
        result = result * base + digit
    return result
