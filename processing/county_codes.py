"""
County display name to county code lookup.

Names are matched by literal equality after the "Județul " / "Municipiul "
prefixes are removed. There is no fuzzy matching: a name missing from the
table simply does not resolve.
"""

from types import MappingProxyType
from typing import Mapping, Optional

COUNTY_PREFIXES = ("Județul ", "Municipiul ")

COUNTY_CODES: Mapping[str, str] = MappingProxyType(
    {
        "Alba": "AB",
        "Arad": "AR",
        "Argeș": "AG",
        "Bacău": "BC",
        "Bihor": "BH",
        "Bistrița-Năsăud": "BN",
        "Botoșani": "BT",
        "Brașov": "BV",
        "Brăila": "BR",
        "Buzău": "BZ",
        "Caraș-Severin": "CS",
        "Cluj": "CJ",
        "Constanța": "CT",
        "Covasna": "CV",
        "Călărași": "CL",
        "Dolj": "DJ",
        "Dâmbovița": "DB",
        "Galați": "GL",
        "Giurgiu": "GR",
        "Gorj": "GJ",
        "Harghita": "HR",
        "Hunedoara": "HD",
        "Ialomița": "IL",
        "Iași": "IS",
        "Ilfov": "IF",
        "Maramureș": "MM",
        "Mehedinți": "MH",
        "Mureș": "MS",
        "Neamț": "NT",
        "Olt": "OT",
        "Prahova": "PH",
        "Satu Mare": "SM",
        "Sibiu": "SB",
        "Suceava": "SV",
        "Sălaj": "SJ",
        "Teleorman": "TR",
        "Timiș": "TM",
        "Tulcea": "TL",
        "Vaslui": "VS",
        "Vrancea": "VN",
        "Vâlcea": "VL",
        "București": "B",
    }
)

KNOWN_CODES = frozenset(COUNTY_CODES.values())


def normalize_county_name(name: str) -> str:
    """Strip the administrative prefix from a county display name."""
    name = name.strip()
    for prefix in COUNTY_PREFIXES:
        name = name.replace(prefix, "", 1)
    return name


def resolve_county_code(name: Optional[str]) -> Optional[str]:
    """Return the county code for a display name, or None if unknown."""
    if not name:
        return None
    return COUNTY_CODES.get(normalize_county_name(name))


def resolve_county_key(key: Optional[str]) -> Optional[str]:
    """Resolve a voter-roll county key that may be a code or a display name."""
    if not key:
        return None
    key = key.strip()
    if key in KNOWN_CODES:
        return key
    return resolve_county_code(key)
