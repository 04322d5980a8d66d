"""
Geographic name canonicalization.

Incident rows and boundary polygons spell district names differently
("Chittagong" vs "Chattogram", "Cox's Bazar" vs "Coxs Bazar"). Both sides of
the district join are folded through ``canonicalize_place_name`` so they agree:

    Chittagong  -> chattogram
    Cox's Bazar -> coxsbazar
    Barisal     -> barishal

An empty result is the "unresolved" key and never matches a real district.
"""

import re
import unicodedata
from typing import Dict, Mapping, Optional

from loguru import logger

NON_LETTER = re.compile(r"[^a-z]+")

# Legacy and common alternate spellings -> standardized district key.
# Some targets map to themselves so the table documents the accepted form.
DISTRICT_ALIASES: Dict[str, str] = {
    "chittagong": "chattogram",
    "chattogram": "chattogram",
    "barisal": "barishal",
    "comilla": "cumilla",
    "jessore": "jashore",
    "bogra": "bogura",
    "jhalakati": "jhalokati",
    "jhalakathi": "jhalokati",
    "chapainababganj": "chapainawabganj",
    "nawabganj": "chapainawabganj",
    "maulvibazar": "moulvibazar",
    "moulvibazar": "moulvibazar",
    "netrokona": "netrakona",
    "narshingdi": "narsingdi",
    "kishorganj": "kishoreganj",
    "serajganj": "sirajganj",
    "dacca": "dhaka",
    "dhaka": "dhaka",
    "brahamanbaria": "brahmanbaria",
    "khagrachari": "khagrachhari",
    "sunamgonj": "sunamganj",
    "gopalgonj": "gopalganj",
}


def fold_place_name(value: Optional[str]) -> str:
    """Strip diacritics, lowercase and drop every non-letter character."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(value))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return NON_LETTER.sub("", stripped.lower())


def build_alias_table(overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Merge config aliases over the built-in table.

    Keys and targets are folded, and chains are resolved so every target is a
    fixed point; that keeps canonicalization idempotent.
    """
    merged: Dict[str, str] = {}
    for source in (DISTRICT_ALIASES, overrides or {}):
        for alias, target in source.items():
            alias_key, target_key = fold_place_name(alias), fold_place_name(target)
            if alias_key and target_key:
                merged[alias_key] = target_key

    resolved: Dict[str, str] = {}
    for alias in merged:
        seen = {alias}
        target = merged[alias]
        while target in merged and merged[target] != target and target not in seen:
            seen.add(target)
            target = merged[target]
        if target in seen and target != alias:
            logger.warning(f"⚠️ Alias cycle through '{alias}', keeping '{merged[alias]}'")
            target = merged[alias]
        resolved[alias] = target

    # A target that is itself aliased elsewhere must map to itself
    for target in set(resolved.values()):
        if resolved.get(target, target) != target:
            resolved[target] = target

    return resolved


DEFAULT_ALIAS_TABLE = build_alias_table()


def canonicalize_place_name(value: Optional[str], aliases: Optional[Mapping[str, str]] = None) -> str:
    """Fold a free-text place name into its canonical join key.

    Args:
        value: Raw district or polygon label
        aliases: Folded alias table (see ``build_alias_table``); defaults to
            the built-in table

    Returns:
        Canonical key, or "" when nothing usable remains
    """
    table = DEFAULT_ALIAS_TABLE if aliases is None else aliases
    folded = fold_place_name(value)
    if not folded:
        return ""
    return table.get(folded, folded)
