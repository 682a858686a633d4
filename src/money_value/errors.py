"""
errors.py — Gerarchia delle eccezioni di money_value

Ogni eccezione ha un codice machine-readable, un messaggio e un dict di
dettagli. Le eccezioni ereditano anche dal built-in corrispondente
(ValueError, TypeError), così il codice che già intercetta quelli
continua a funzionare.
"""

from __future__ import annotations


class MoneyError(Exception):
    """Base per tutti gli errori del dominio Money."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidAmount(MoneyError, ValueError):
    """L'input non rappresenta un numero reale (None, NaN, Infinity, testo)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_AMOUNT", message, details)


class InvalidArgument(MoneyError, ValueError):
    """Argomento non valido per fraction(), allocate() o split()."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_ARGUMENT", message, details)


class TypeMismatch(MoneyError, TypeError):
    """L'operando non è convertibile in Money (o non è uno scalare)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("TYPE_MISMATCH", message, details)


class UnsupportedOperation(MoneyError, TypeError):
    """Operazione vietata: dividere Money può perdere centesimi."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("UNSUPPORTED_OPERATION", message, details)
