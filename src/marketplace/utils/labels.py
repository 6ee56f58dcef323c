"""Parsing of status and role labels as stored by older clients.

Existing records spell the same status many ways ("Livrée", "livree",
"LIVRE", "delivered"). Labels are compared after stripping accents and
case and collapsing separators.
"""

import unicodedata
from enum import Enum

from protean.exceptions import ValidationError


def normalize_label(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.strip().lower())
    plain = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return "_".join(plain.replace("-", " ").replace("_", " ").split())


def parse_label(enum_cls: type[Enum], value, aliases: dict[str, Enum], field: str = "status"):
    """Return the enum member named by ``value`` or raise ``ValidationError``."""
    if isinstance(value, enum_cls):
        return value

    key = normalize_label(str(value or ""))
    for member in enum_cls:
        if key == normalize_label(member.value):
            return member
    if key in aliases:
        return aliases[key]

    raise ValidationError({field: [f"Unknown {field}: {value}"]})
