"""
money_value — Immutable money type with exact-cent precision

No floating point drift, no lost pennies.

================================================================================
QUICK START
================================================================================

Basic usage:

    from money_value import Money

    # Create money (rounded once, half-up, to the cent)
    price = Money("19.995")            # Money('20.00')
    total = price * 3                  # Money('60.00')

    # Split evenly (sum ALWAYS equals original)
    shares = Money("100.00").split(3)  # [33.34, 33.33, 33.33]
    assert sum(shares, Money.empty()) == Money("100.00")

    # Allocate by ratio; leftover cents go to the first parties
    Money("1.00").allocate([0.3333, 0.3333, 0.3334])   # [0.34, 0.33, 0.33]

    # Reverse a rate: pre-tax amount of a tax-inclusive total
    Money("122.00").fraction(0.22)     # Money('100.00')

    # Dividing is not allowed: use split() or allocate()
    Money("10.00") / 3                 # raises UnsupportedOperation

Parsing free text:

    from money_value import Money, configure

    Money.parse("$1,234.56")           # Money('1234.56')
    Money.parse("1.234,56 €")          # Money('1234.56')

    # Swap the parser once at start-up (or set MONEY_PARSER=pkg.module.Parser)
    configure(parser=MyParser())

================================================================================
"""

# Core Money type
from .core import (
    Money,
    SupportsToDecimal,
    SupportsToMoney,
)

# Errors
from .errors import (
    MoneyError,
    InvalidAmount,
    InvalidArgument,
    TypeMismatch,
    UnsupportedOperation,
)

# Parsing and configuration
from .config import (
    Parser,
    MoneyConfig,
    MoneySettings,
    configure,
    get_config,
    get_settings,
    reset_config,
    using_parser,
)
from .parser import MoneyParser

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Core
    "Money",
    "SupportsToDecimal",
    "SupportsToMoney",
    # Errors
    "MoneyError",
    "InvalidAmount",
    "InvalidArgument",
    "TypeMismatch",
    "UnsupportedOperation",
    # Parsing
    "Parser",
    "MoneyParser",
    "MoneyConfig",
    "MoneySettings",
    "configure",
    "get_config",
    "get_settings",
    "reset_config",
    "using_parser",
]
