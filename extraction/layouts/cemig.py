"""
CEMIG residential bill layout.

Amounts on CEMIG bills are printed pt-BR style ("1.234,56"). Line items read
``<description> kWh <quantity> <unit price> <value> ...``; some exports drop
the unit price column, others print the unit after the quantity. Each field
chain lists the full line first and the degraded phrasings after it.
"""

import re

from extraction.core.config import CLIENT_NUMBER_DIGITS
from extraction.layouts.base import (
    ExtractionField,
    FieldKind,
    Layout,
    compile_patterns,
)

CEMIG_LAYOUT_NAME = "CEMIG"
CEMIG_LAYOUT_VERSION = "1.0.0"

# Quantities may carry thousands dots; money always has a decimal comma.
# Both must start with a digit so "..." or "-" never parse as a number.
_QTY = r"\d[\d.]*"
_MONEY = r"\d[\d.]*,\d+"

_ELECTRICITY = r"Energia\s+El[ée]trica"
_SCEE = r"Energia\s+SCEE\s+s/\s*ICMS"
_COMPENSATED = r"Energia\s+compensada\s+GD\s+I"


def _quantity_chain(item: str) -> tuple[re.Pattern[str], ...]:
    return compile_patterns(
        rf"{item}\s+kWh\s+({_QTY})",
        rf"{item}\s+({_QTY})\s*kWh",
    )


def _value_chain(item: str, sign: str = "") -> tuple[re.Pattern[str], ...]:
    return compile_patterns(
        rf"{item}\s+kWh\s+{_QTY}\s+{_MONEY}\s+{sign}({_MONEY})",
        rf"{item}\s+kWh\s+{_QTY}\s+{sign}({_MONEY})",
        rf"{item}\s+{_QTY}\s*kWh\s+{sign}({_MONEY})",
    )


CLIENT_NUMBER = ExtractionField(
    name="client_number",
    patterns=compile_patterns(
        rf"N[º°o]\s*DO\s*CLIENTE\s*(\d{{{CLIENT_NUMBER_DIGITS}}})\b",
        rf"N[º°o]\s*DO\s*CLIENTE\s+N[º°o]\s*DA\s*INSTALA[ÇC][ÃA]O\s+(\d{{{CLIENT_NUMBER_DIGITS}}})\b",
        rf"\b(\d{{{CLIENT_NUMBER_DIGITS}}})\b",
    ),
)

REFERENCE_MONTH = ExtractionField(
    name="reference_month",
    patterns=compile_patterns(
        r"Referente\s+[aà]\s+([A-ZÇ][A-ZÇ0-9]{2,8})\s*/\s*(\d{4})",
        r"M[ÊE]S\s*/\s*ANO\s*:?\s*([A-ZÇ][A-ZÇ0-9]{2,8})\s*/\s*(\d{4})",
        r"\b([A-Z]{3})/(\d{4})\b",
    ),
    kind=FieldKind.MONTH_YEAR,
)

PUBLIC_LIGHTING_VALUE = ExtractionField(
    name="public_lighting_value",
    patterns=compile_patterns(
        rf"Contrib\s*Ilum\s*P[uú]blica\s*Municipal\s+({_MONEY})",
        rf"Contribui[çc][ãa]o\s*(?:de\s*)?Ilumina[çc][ãa]o\s*P[uú]blica(?:\s*Municipal)?\s+({_MONEY})",
        rf"Ilumina[çc][ãa]o\s+P[uú]blica\s+({_MONEY})",
    ),
    kind=FieldKind.DECIMAL,
)


def build_cemig_layout() -> Layout:
    return Layout(
        name=CEMIG_LAYOUT_NAME,
        version=CEMIG_LAYOUT_VERSION,
        fields=(
            CLIENT_NUMBER,
            REFERENCE_MONTH,
            ExtractionField("electricity_quantity", _quantity_chain(_ELECTRICITY), FieldKind.INTEGER),
            ExtractionField("electricity_value", _value_chain(_ELECTRICITY), FieldKind.DECIMAL),
            ExtractionField("scee_quantity", _quantity_chain(_SCEE), FieldKind.INTEGER),
            ExtractionField("scee_value", _value_chain(_SCEE), FieldKind.DECIMAL),
            ExtractionField(
                "compensated_energy_quantity", _quantity_chain(_COMPENSATED), FieldKind.INTEGER
            ),
            ExtractionField(
                "compensated_energy_value",
                _value_chain(_COMPENSATED, sign=r"-?\s*"),
                FieldKind.NEGATED_DECIMAL,
            ),
            PUBLIC_LIGHTING_VALUE,
        ),
        format_rules={"client_number": re.compile(rf"\d{{{CLIENT_NUMBER_DIGITS}}}")},
    )
