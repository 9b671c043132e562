"""Amount text cleaning and parsing."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

SEPARATORS = ".,"


def sanitize_amount(text: str) -> str:
    """Keep digits and the first decimal separator, in order; drop the rest.

    >>> sanitize_amount("1 2a3,4.5")
    '123,45'
    """
    kept = []
    seen_separator = False
    for ch in text or "":
        if "0" <= ch <= "9":
            kept.append(ch)
        elif ch in SEPARATORS and not seen_separator:
            seen_separator = True
            kept.append(ch)
    return "".join(kept)


def parse_amount(text: str) -> Optional[Decimal]:
    """Parse a sanitized amount, accepting ``,`` as the decimal separator.

    Returns None when the text is not a finite decimal number.
    """
    normalized = (text or "").strip().replace(",", ".")
    if not normalized:
        return None
    try:
        value = Decimal(normalized)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value
