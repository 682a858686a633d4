"""
core.py — Domain Primitive per importi monetari a valuta implicita

================================================================================
DESIGN PRINCIPLES
================================================================================

1. RAPPRESENTAZIONE INTERNA
   Un Decimal già arrotondato a 2 decimali e il suo equivalente intero in
   centesimi. Invariante: value == cents / 100, sempre.

2. UN SOLO ARROTONDAMENTO
   L'input viene convertito in un numero razionale ESATTO (Fraction) e
   arrotondato una sola volta, HALF_UP (0.005 -> 0.01, -0.005 -> -0.01).
   I float passano dalla loro repr: 2.675 significa 2.675, non
   2.67499999999999982236431605997495353221893310546875.

3. IMMUTABILITA
   Frozen dataclass. Ogni operazione restituisce nuova istanza.
   Nessun side effect, safe per concorrenza.

4. NIENTE DIVISIONI
   Money / x solleva UnsupportedOperation. Per distribuire un importo si usa
   split() (parti uguali) o allocate() (per percentuali): entrambe
   garantiscono sum(parts) == original.

5. COERCIZIONE ESPLICITA
   Gli operandi di + e - devono implementare to_money(); gli input del
   costruttore possono implementare to_decimal(). Nessun fallback silenzioso:
   ciò che non è convertibile solleva un errore tipizzato.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import TYPE_CHECKING, ClassVar, Iterable, Protocol, runtime_checkable
import logging
import math
import numbers

from .config import get_config
from .errors import InvalidAmount, InvalidArgument, TypeMismatch, UnsupportedOperation

if TYPE_CHECKING:
    from .config import MoneyConfig


logger = logging.getLogger(__name__)

# Esponente decimale massimo accettato (1e±1000), oltre i limiti del float
_MAX_MAGNITUDE = 1000


# ==============================================================================
# CAPABILITY PROTOCOLS
# ==============================================================================

@runtime_checkable
class SupportsToDecimal(Protocol):
    """Oggetti convertibili in un Decimal esatto (es. quantità di dominio)."""

    def to_decimal(self) -> Decimal: ...


@runtime_checkable
class SupportsToMoney(Protocol):
    """Oggetti convertibili in Money. Requisito per gli operandi di + e -."""

    def to_money(self) -> Money: ...


# ==============================================================================
# CONVERSIONE E ARROTONDAMENTO
# ==============================================================================

def _decimal_to_fraction(value: Decimal, source: object) -> Fraction:
    if not value.is_finite():
        raise InvalidAmount(
            f"Amount is not a finite number: {source!r}",
            {"input": repr(source)},
        )
    if value.is_zero():
        return Fraction(0)
    # Fraction(value) costa 10**|esponente|: "1e999999999" non deve bloccare
    if not -_MAX_MAGNITUDE <= value.adjusted() <= _MAX_MAGNITUDE:
        raise InvalidAmount(
            f"Amount is out of range: {source!r}",
            {"input": repr(source), "max_exponent": _MAX_MAGNITUDE},
        )
    return Fraction(value)


def _to_fraction(value: object) -> Fraction:
    """
    Converte un input in un razionale esatto.

    Accetta: Money, int, Fraction (e altri Rational), float, Decimal, str
    con un letterale decimale, oggetti SupportsToDecimal. Tutto il resto
    passa dalla sua rappresentazione testuale.

    Raises:
        InvalidAmount: None, bool, NaN, Infinity o testo non numerico.
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount(f"Not a monetary amount: {value!r}", {"input": repr(value)})

    if isinstance(value, Money):
        return value._exact()
    if isinstance(value, numbers.Rational):
        return Fraction(value.numerator, value.denominator)
    if isinstance(value, Decimal):
        return _decimal_to_fraction(value, value)
    if isinstance(value, float):
        # repr() restituisce la forma decimale più corta che ricostruisce il float
        return _decimal_to_fraction(Decimal(repr(value)), value)
    if isinstance(value, SupportsToDecimal):
        converted = value.to_decimal()
        if not isinstance(converted, Decimal):
            raise InvalidAmount(
                f"{type(value).__name__}.to_decimal() returned "
                f"{type(converted).__name__}, expected Decimal",
                {"input": repr(value)},
            )
        return _decimal_to_fraction(converted, value)

    text = value.strip() if isinstance(value, str) else str(value)
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        raise InvalidAmount(
            f"Cannot convert {value!r} to a decimal amount",
            {"input": repr(value)},
        ) from None
    return _decimal_to_fraction(parsed, value)


def _round_half_up(value: Fraction) -> int:
    """Arrotonda all'intero più vicino, 0.5 lontano da zero."""
    rounded = math.floor(abs(value) + Fraction(1, 2))
    return rounded if value >= 0 else -rounded


def _cents_to_decimal(cents: int) -> Decimal:
    # Costruttore da stringa: esatto, indipendente dalla precision del context
    return Decimal(f"{cents}E-2")


# ==============================================================================
# MONEY CLASS
# ==============================================================================

@dataclass(frozen=True, slots=True, init=False, eq=False, repr=False)
class Money:
    """
    Domain Primitive per importi monetari.

    INVARIANTI:
    1. _value ha sempre esattamente 2 decimali
    2. _cents == _value * 100, intero
    3. Ogni operazione restituisce una nuova istanza
    4. split() e allocate() garantiscono sum(parts) == self

    USAGE:
        bill = Money("100.00")
        shares = bill.split(3)          # [33.34, 33.33, 33.33]
        net = Money("122.00").fraction(Decimal("0.22"))   # 100.00

    SERIALIZATION:
        str(m) -> "1234.50", m.cents -> 123450.
        Nessun'altra rappresentazione è considerata stabile.
    """
    _value: Decimal
    _cents: int

    # Tolleranza sulla somma delle percentuali di allocate(). La somma è
    # calcolata in modo esatto, quindi basta a coprire rapporti ottenuti da
    # divisioni float (es. [1/3, 1/3, 1/3]).
    ALLOCATION_TOLERANCE: ClassVar[Decimal] = Decimal("1e-9")

    def __init__(self, value: object = 0):
        cents = _round_half_up(_to_fraction(value) * 100)
        object.__setattr__(self, "_cents", cents)
        object.__setattr__(self, "_value", _cents_to_decimal(cents))

    # -------------------------------------------------------------------------
    # Costruttori
    # -------------------------------------------------------------------------

    @classmethod
    def from_cents(cls, cents: object) -> Money:
        """
        Costruttore da centesimi.

        Un conteggio frazionario (es. il risultato di una divisione float a
        monte) viene prima arrotondato HALF_UP al centesimo intero.
        """
        whole = _round_half_up(_to_fraction(cents))
        return cls(Fraction(whole, 100))

    @classmethod
    def empty(cls) -> Money:
        """Zero. Utile come valore iniziale per sum()."""
        return cls()

    @classmethod
    def parse(cls, text: str, config: MoneyConfig | None = None) -> Money:
        """
        Interpreta testo libero ("$1,234.56", "1.234,56 €") col parser attivo.

        Il parser arriva da `config` se passato, altrimenti dalla
        configurazione corrente (vedi money_value.config.get_config).
        """
        active = config if config is not None else get_config()
        return active.parser.parse(text)

    # -------------------------------------------------------------------------
    # Capability
    # -------------------------------------------------------------------------

    def to_money(self) -> Money:
        return self

    def to_decimal(self) -> Decimal:
        return self._value

    def _exact(self) -> Fraction:
        return Fraction(self._cents, 100)

    # -------------------------------------------------------------------------
    # Operazioni aritmetiche
    # -------------------------------------------------------------------------

    def __add__(self, other: SupportsToMoney) -> Money:
        return Money(self._exact() + _coerce_money(other, "+")._exact())

    def __sub__(self, other: SupportsToMoney) -> Money:
        return Money(self._exact() - _coerce_money(other, "-")._exact())

    def __mul__(self, factor: numbers.Real | Decimal) -> Money:
        """
        Moltiplicazione per scalare (int, float, Decimal, Fraction).

        Il prodotto è esatto, poi arrotondato HALF_UP al centesimo.
        """
        if isinstance(factor, bool) or not isinstance(factor, (numbers.Real, Decimal)):
            raise TypeMismatch(
                f"Money can only be multiplied by a number, "
                f"not {type(factor).__name__}"
            )
        return Money(self._exact() * _to_fraction(factor))

    def __rmul__(self, factor: numbers.Real | Decimal) -> Money:
        return self.__mul__(factor)

    def __truediv__(self, other: object) -> Money:
        raise UnsupportedOperation(
            "Dividing money objects can lose pennies. "
            "Use split() or allocate() instead",
            {"divisor": repr(other)},
        )

    def __floordiv__(self, other: object) -> Money:
        return self.__truediv__(other)

    def __neg__(self) -> Money:
        return Money.from_cents(-self._cents)

    def __abs__(self) -> Money:
        return Money.from_cents(abs(self._cents))

    def fraction(self, rate: object) -> Money:
        """
        Scorporo: value / (1 + rate).

        Esempio: Money("122.00").fraction(0.22) == Money("100.00"), cioè
        l'imponibile contenuto in un totale IVA inclusa.

        Raises:
            InvalidArgument: se rate < 0
        """
        exact_rate = _to_fraction(rate)
        if exact_rate < 0:
            raise InvalidArgument("rate should be positive", {"rate": repr(rate)})
        return Money(self._exact() / (1 + exact_rate))

    # -------------------------------------------------------------------------
    # Distribuzione
    # -------------------------------------------------------------------------

    def allocate(self, ratios: Iterable[object]) -> list[Money]:
        """
        Alloca l'importo tra più parti secondo le percentuali date, senza
        perdere centesimi.

        ALGORITMO:
        1. quota_i = floor(cents * ratio_i / sum(ratios)), in aritmetica esatta
        2. left_over = cents - sum(quote), sempre >= 0
        3. I centesimi avanzati vanno uno alla volta alle parti, in ordine,
           a partire dall'indice 0 (round-robin)

        Le prime parti sono quindi favorite: Money("1.00").allocate(
        [0.3333, 0.3333, 0.3334]) restituisce [0.34, 0.33, 0.33].

        Percentuali con somma < 1 sono normalizzate sulla loro somma.

        Raises:
            InvalidArgument: lista vuota, percentuali negative, somma nulla
                o superiore al 100% (oltre ALLOCATION_TOLERANCE)
        """
        weights = [_to_ratio(r) for r in ratios]
        if not weights:
            raise InvalidArgument("need at least one split")
        if any(w < 0 for w in weights):
            raise InvalidArgument("splits cannot be negative", {"splits": [str(w) for w in weights]})

        allocations = sum(weights, Fraction(0))
        if allocations - 1 > Fraction(self.ALLOCATION_TOLERANCE):
            raise InvalidArgument(
                "splits add to more than 100%",
                {"total": float(allocations)},
            )
        if allocations == 0:
            raise InvalidArgument("splits add to zero")

        amounts = [math.floor(self._cents * w / allocations) for w in weights]
        left_over = self._cents - sum(amounts)

        if left_over:
            logger.debug(
                "Distributing %d left over cent(s) of %s across %d parties",
                left_over, self, len(amounts),
            )
        for i in range(left_over):
            amounts[i % len(amounts)] += 1

        return [Money.from_cents(c) for c in amounts]

    def split(self, n: int) -> list[Money]:
        """
        Divide l'importo in n parti uguali con somma ESATTA.

        Le prime (cents % n) parti ricevono un centesimo in più:
        Money("1.00").split(3) == [0.34, 0.33, 0.33].

        Raises:
            InvalidArgument: se n non è un intero >= 1
        """
        if isinstance(n, bool) or not isinstance(n, numbers.Integral):
            raise InvalidArgument(f"number of parties must be an integer, not {type(n).__name__}")
        n = int(n)
        if n < 1:
            raise InvalidArgument("need at least one party", {"parties": n})

        low = Money.from_cents(self._cents // n)
        high = Money.from_cents(low.cents + 1)
        remainder = self._cents % n

        return [high if i < remainder else low for i in range(n)]

    # -------------------------------------------------------------------------
    # Comparazione
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return type(self) is type(other) and self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self._cents < other._cents

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self._cents <= other._cents

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self._cents > other._cents

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self._cents >= other._cents

    # -------------------------------------------------------------------------
    # Proprietà e output
    # -------------------------------------------------------------------------

    @property
    def value(self) -> Decimal:
        """Valore decimale, sempre con 2 decimali."""
        return self._value

    @property
    def cents(self) -> int:
        """Valore in centesimi. Rappresentazione canonica per macchine."""
        return self._cents

    def is_zero(self) -> bool:
        return self._cents == 0

    def is_positive(self) -> bool:
        return self._cents > 0

    def is_negative(self) -> bool:
        return self._cents < 0

    def to_integer(self) -> int:
        """
        Parte intera, troncata verso zero.

        ATTENZIONE: butta via i centesimi.
        """
        return int(self._value)

    def to_float(self) -> float:
        """
        ATTENZIONE: restituisce float, usare SOLO per display/interop.
        Non usare per calcoli.
        """
        return float(self._value)

    def to_display_string(self) -> str:
        return f"{self._value:.2f}"

    def to_serializable(self) -> str:
        """Forma stabile per JSON, template e log: "1234.50"."""
        return self.to_display_string()

    def to_cents(self) -> int:
        return self._cents

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"


# ==============================================================================
# HELPERS
# ==============================================================================

def _coerce_money(other: object, operator: str) -> Money:
    if not isinstance(other, SupportsToMoney):
        raise TypeMismatch(
            f"Operation not allowed: Money {operator} {type(other).__name__}. "
            f"Convert the operand to Money first.",
            {"operand": repr(other)},
        )
    converted = other.to_money()
    if not isinstance(converted, Money):
        raise TypeMismatch(
            f"{type(other).__name__}.to_money() returned "
            f"{type(converted).__name__}, expected Money",
            {"operand": repr(other)},
        )
    return converted


def _to_ratio(ratio: object) -> Fraction:
    try:
        return _to_fraction(ratio)
    except InvalidAmount as exc:
        raise InvalidArgument(f"Invalid split ratio: {ratio!r}", exc.details) from exc
