# evoting/reference/constituencies.py

"""Static constituency reference data.

Codes follow ``XX-N`` where XX is NA (National Assembly) or PP/PS/PK/PB (the
Punjab, Sindh, KPK and Balochistan provincial assemblies) and N is 1-3 digits.
The table is a sample, not the full delimitation list.
"""

import re
from collections import namedtuple

Constituency = namedtuple('Constituency', ['code', 'name', 'province', 'assembly'])

NATIONAL = 'National Assembly'
PROVINCIAL = 'Provincial Assembly'

CONSTITUENCIES = [
    Constituency('NA-15', 'Lahore-III', 'Punjab', NATIONAL),
    Constituency('NA-125', 'Lahore-VII', 'Punjab', NATIONAL),
    Constituency('NA-132', 'Kasur-I', 'Punjab', NATIONAL),
    Constituency('NA-95', 'Mianwali-I', 'Punjab', NATIONAL),
    Constituency('NA-57', 'Rawalpindi-II', 'Punjab', NATIONAL),
    Constituency('NA-213', 'Larkana-I', 'Sindh', NATIONAL),
    Constituency('NA-196', 'Karachi Central-I', 'Sindh', NATIONAL),
    Constituency('NA-206', 'Shikarpur', 'Sindh', NATIONAL),
    Constituency('NA-38', 'Kurram', 'KPK', NATIONAL),
    Constituency('NA-7', 'Peshawar-II', 'KPK', NATIONAL),
    Constituency('NA-266', 'Quetta-II', 'Balochistan', NATIONAL),
    Constituency('PP-158', 'Lahore-XIX', 'Punjab', PROVINCIAL),
    Constituency('PP-159', 'Lahore-XX', 'Punjab', PROVINCIAL),
    Constituency('PS-95', 'Karachi Central-I', 'Sindh', PROVINCIAL),
    Constituency('PK-71', 'Peshawar-VII', 'KPK', PROVINCIAL),
    Constituency('PB-40', 'Quetta-VII', 'Balochistan', PROVINCIAL),
]

CODE_PATTERN = re.compile(r'^(NA|PP|PS|PK|PB)-\d{1,3}$')

_BY_CODE = {c.code: c for c in CONSTITUENCIES}


def normalize(code):
    return code.strip().upper()


def is_valid_format(code):
    return bool(CODE_PATTERN.match(normalize(code)))


def get(code):
    return _BY_CODE.get(normalize(code))


def validate(code):
    """Return ``{'valid', 'normalized', 'error', 'constituency'}`` for a user-entered code."""
    if not isinstance(code, str) or not code.strip():
        return {'valid': False, 'normalized': None, 'error': 'Constituency code is required',
                'constituency': None}

    normalized = normalize(code)
    if not CODE_PATTERN.match(normalized):
        return {'valid': False, 'normalized': normalized,
                'error': 'Invalid format. Use format like NA-125, PP-158, PS-95, PK-71, or PB-40',
                'constituency': None}

    constituency = _BY_CODE.get(normalized)
    if constituency is None:
        return {'valid': False, 'normalized': normalized,
                'error': f'Constituency {normalized} not found. Please check the code.',
                'constituency': None}

    return {'valid': True, 'normalized': normalized, 'error': None, 'constituency': constituency}


def suggestions(prefix, limit=10):
    """Constituencies whose code or name contains ``prefix`` (case-insensitive)."""
    if not prefix:
        return CONSTITUENCIES[:limit]
    needle = prefix.strip().upper()
    matches = [c for c in CONSTITUENCIES if needle in c.code or needle in c.name.upper()]
    return matches[:limit]


def by_province(province):
    return [c for c in CONSTITUENCIES if c.province == province]


def provinces():
    seen = []
    for c in CONSTITUENCIES:
        if c.province not in seen:
            seen.append(c.province)
    return seen
