"""
Data models and static lookup tables.
"""

from .fips import STATE_FIPS, county_state_fips, resolve_states, state_fips
from .inventory import Inventory, InventoryEntry

__all__ = [
    "STATE_FIPS",
    "county_state_fips",
    "resolve_states",
    "state_fips",
    "Inventory",
    "InventoryEntry",
]
