from __future__ import annotations

import re
from dataclasses import dataclass

from forexa.core.exceptions import DataValidationError

_SEPARATED = re.compile(r"^([A-Za-z]{3})\s*[/\-_ ]\s*([A-Za-z]{3})$")
_CONCATENATED = re.compile(r"^([A-Za-z]{3})([A-Za-z]{3})$")


@dataclass(frozen=True, slots=True)
class CurrencyPair:
    """A currency pair in canonical ``BASE/QUOTE`` form with per-provider renderings."""

    base: str
    quote: str

    @classmethod
    def parse(cls, symbol: str) -> "CurrencyPair":
        if not isinstance(symbol, str):
            raise DataValidationError(f"Symbol must be a string, got {type(symbol).__name__}", {"symbol": repr(symbol)})
        raw = symbol.strip()
        if raw.upper().startswith("C:"):
            raw = raw[2:]
        match = _SEPARATED.match(raw) or _CONCATENATED.match(raw)
        if match is None:
            raise DataValidationError(
                f"Invalid currency pair '{symbol}', expected BASE/QUOTE such as EUR/USD",
                {"symbol": symbol},
            )
        return cls(base=match.group(1).upper(), quote=match.group(2).upper())

    @property
    def slashed(self) -> str:
        return f"{self.base}/{self.quote}"

    @property
    def concatenated(self) -> str:
        return f"{self.base}{self.quote}"

    @property
    def polygon_ticker(self) -> str:
        return f"C:{self.concatenated}"

    def __str__(self) -> str:
        return self.slashed


def normalize_symbol(symbol: str | CurrencyPair) -> CurrencyPair:
    if isinstance(symbol, CurrencyPair):
        return symbol
    return CurrencyPair.parse(symbol)


def normalize_currency(code: str) -> str:
    """Validate a single ISO currency code such as ``eur`` and return it upper-cased."""

    cleaned = code.strip() if isinstance(code, str) else ""
    if len(cleaned) != 3 or not (cleaned.isascii() and cleaned.isalpha()):
        raise DataValidationError(f"Invalid currency code '{code}'", {"currency": str(code)})
    return cleaned.upper()
