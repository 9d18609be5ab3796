"""Shared pydantic types for pool definitions and quotes.

Token amounts cross the service boundary as decimal strings so that
18-decimal values survive JSON clients that only have doubles.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

# Amounts are unsigned 256-bit on the chains these pools mirror
UINT256_MAX = 2**256 - 1


def validate_amount(value: Any) -> str:
    """Validate a token amount given as int or decimal string.

    Raises:
        ValueError: If the value is not a non-negative integer within uint256
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be an integer, got bool")
    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Amount must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Amount must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Amount cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Amount overflow: {value} > 2^256-1")
    return str(int_value)


# 20-byte hex account or token identifier
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# Unsigned token amount as decimal string (validated)
Amount = Annotated[
    str,
    BeforeValidator(validate_amount),
    Field(description="Unsigned integer token amount as decimal string"),
]


def normalize_address(address: str) -> str:
    """Lowercase an address and ensure the 0x prefix."""
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr
    return addr
