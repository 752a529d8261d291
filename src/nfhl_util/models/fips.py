"""
State and territory FIPS codes known to FEMA's Map Service Center.
"""

from typing import Dict, Iterable, Optional

from nfhl_util.core.errors import ValidationError

# Postal abbreviation -> 2-digit FIPS code
STATE_FIPS: Dict[str, str] = {
    "AK": "02",
    "AL": "01",
    "AR": "05",
    "AS": "60",
    "AZ": "04",
    "CA": "06",
    "CO": "08",
    "CT": "09",
    "DC": "11",
    "DE": "10",
    "FL": "12",
    "GA": "13",
    "GU": "66",
    "HI": "15",
    "IA": "19",
    "ID": "16",
    "IL": "17",
    "IN": "18",
    "KS": "20",
    "KY": "21",
    "LA": "22",
    "MA": "25",
    "MD": "24",
    "ME": "23",
    "MI": "26",
    "MN": "27",
    "MO": "29",
    "MS": "28",
    "MT": "30",
    "NC": "37",
    "ND": "38",
    "NE": "31",
    "NH": "33",
    "NJ": "34",
    "NM": "35",
    "NV": "32",
    "NY": "36",
    "OH": "39",
    "OK": "40",
    "OR": "41",
    "PA": "42",
    "PR": "72",
    "RI": "44",
    "SC": "45",
    "SD": "46",
    "TN": "47",
    "TX": "48",
    "UT": "49",
    "VA": "51",
    "VI": "78",
    "VT": "50",
    "WA": "53",
    "WI": "55",
    "WV": "54",
    "WY": "56",
    "MH": "68",  # may not be available in MSC
    "MP": "69",
    "FM": "64",  # may not be available in MSC
}


def state_fips(abbreviation: str) -> str:
    """
    Look up the FIPS code for a state or territory.

    Args:
        abbreviation: Two-letter postal abbreviation (case-insensitive)

    Returns:
        2-digit FIPS code

    Raises:
        ValidationError: If the abbreviation is unknown
    """
    key = abbreviation.strip().upper()
    try:
        return STATE_FIPS[key]
    except KeyError:
        raise ValidationError(
            f"Unknown state abbreviation: {abbreviation!r}",
            field="state",
            suggestions=[f"Use one of: {', '.join(sorted(STATE_FIPS))}"],
        ) from None


def resolve_states(abbreviations: Optional[Iterable[str]] = None) -> Dict[str, str]:
    """
    Resolve a state filter to an abbreviation -> FIPS mapping ordered by FIPS.

    An empty or missing filter selects every state and territory.
    """
    if abbreviations:
        selected = {abbr.strip().upper(): state_fips(abbr) for abbr in abbreviations}
    else:
        selected = dict(STATE_FIPS)

    return dict(sorted(selected.items(), key=lambda item: item[1]))


def county_state_fips(county_fips: str) -> str:
    """Return the 2-digit state part of a 5-digit county FIPS code."""
    if len(county_fips) != 5 or not county_fips.isdigit():
        raise ValidationError(
            f"Invalid county FIPS code: {county_fips!r}",
            field="county_fips",
        )
    return county_fips[:2]
