"""
Number-to-words conversion for receipt amounts (Gujarati).

Amounts are grouped the Indian way: hundreds (સો), thousands (હજાર),
lakhs (લાખ) and crores (કરોડ).  Everything below one hundred comes from a
fixed vocabulary table because Gujarati number words for 1–99 are not
compositional.

>>> amount_in_words(1250)
'એક હજાર બે સો પચાસ રૂપિયા પૂરાં'
"""

from __future__ import annotations

import math
from typing import Union

# Index == number.  Entry 0 is empty so that zero remainders vanish.
_WORDS_0_TO_99: tuple[str, ...] = (
    "", "એક", "બે", "ત્રણ", "ચાર",
    "પાંચ", "છ", "સાત", "આઠ", "નવ",
    "દસ", "અગિયાર", "બાર", "તેર", "ચૌદ",
    "પંદર", "સોળ", "સત્તર", "અઢાર", "ઓગણીસ",
    "વીસ", "એકવીસ", "બાવીસ", "ત્રેવીસ", "ચોવીસ",
    "પચ્ચીસ", "છવ્વીસ", "સત્તાવીસ", "અઠ્ઠાવીસ", "ઓગણત્રીસ",
    "ત્રીસ", "એકત્રીસ", "બત્રીસ", "તેંત્રીસ", "ચોત્રીસ",
    "પાંત્રીસ", "છત્રીસ", "સાડત્રીસ", "આડત્રીસ", "ઓગણચાલીસ",
    "ચાલીસ", "એકતાલીસ", "બેતાલીસ", "તેતાલીસ", "ચુંમ્માલીસ",
    "પિસ્તાલીસ", "છેંતાલીસ", "સુડતાલીસ", "અડતાલીસ", "ઓગણપચાસ",
    "પચાસ", "એકાવન", "બાવન", "ત્રેપન", "ચોપન",
    "પંચાવન", "છપ્પન", "સત્તાવન", "અઠાવન", "ઓગણસાઠ",
    "સાઠ", "એકસઠ", "બાસઠ", "ત્રેસઠ", "ચોસઠ",
    "પાંસઠ", "છાસઠ", "સડસઠ", "અડસઠ", "ઓગણસિત્તેર",
    "સિત્તેર", "એકોતેર", "બોંતેર", "તોંતેર", "ચુંમોતેર",
    "પંચોતેર", "છોંતેર", "સીતોતેર", "ઇઠોતેર", "ઓગણએંસી",
    "એંસી", "એક્યાસી", "બ્યાસી", "ત્યાસી", "ચોરાસી",
    "પંચાસી", "છયાસી", "સત્યાસી", "અઠયાસી", "નેવ્યાસી",
    "નેવું", "એકાણું", "બાણું", "ત્રાણું", "ચોરાણું",
    "પંચાણું", "છન્નું", "સતાણું", "અઠાણું", "નવ્વાણું",
)

HUNDRED = "સો"
THOUSAND = "હજાર"
LAKH = "લાખ"
CRORE = "કરોડ"

RUPEES_SUFFIX = "રૂપિયા પૂરાં"
ZERO_WORDS = f"શૂન્ય {RUPEES_SUFFIX}"

# (divisor, unit word) from largest to smallest; anything >= a crore is
# handled recursively so arbitrarily large amounts still convert.
_GROUPS: tuple[tuple[int, str], ...] = (
    (10_000_000, CRORE),
    (100_000, LAKH),
    (1_000, THOUSAND),
    (100, HUNDRED),
)


def to_gujarati_words(n: int) -> str:
    """Spell a non-negative integer in Gujarati without a currency suffix.

    Returns an empty string for 0; callers that need a zero word should use
    :func:`amount_in_words`.
    """
    if n < 0:
        raise ValueError(f"Cannot convert negative number to words: {n}")
    if n < 100:
        return _WORDS_0_TO_99[n]

    for divisor, unit in _GROUPS:
        if n >= divisor:
            head, rest = divmod(n, divisor)
            # The hundreds head is always a single digit: plain lookup.
            head_words = _WORDS_0_TO_99[head] if divisor == 100 else to_gujarati_words(head)
            words = f"{head_words} {unit}"
            if rest:
                words += " " + to_gujarati_words(rest)
            return words

    raise AssertionError("unreachable")  # pragma: no cover


def amount_in_words(amount: Union[int, float]) -> str:
    """Render a rupee amount the way it is printed on the receipt.

    Paise are dropped (the amount is floored) before conversion.
    """
    if isinstance(amount, float) and (math.isnan(amount) or math.isinf(amount)):
        raise ValueError(f"Cannot convert non-finite amount to words: {amount}")
    if amount < 0:
        raise ValueError(f"Cannot convert negative amount to words: {amount}")

    rupees = math.floor(amount)
    if rupees == 0:
        return ZERO_WORDS
    return f"{to_gujarati_words(rupees)} {RUPEES_SUFFIX}"
