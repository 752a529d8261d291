"""
Build county- and state-level NFHL inventories.
"""

import logging
from typing import Iterable, Optional

from nfhl_util.core.logging_config import add_log_context
from nfhl_util.integrations.fema.client import FEMAPortalClient
from nfhl_util.models.fips import county_state_fips, resolve_states
from nfhl_util.models.inventory import Inventory

logger = logging.getLogger(__name__)


async def inventory_counties(
    client: FEMAPortalClient,
    states: Optional[Iterable[str]] = None,
) -> Inventory:
    """
    List the effective NFHL file of every county, keyed by 5-digit FIPS.

    Args:
        client: Open portal client
        states: Optional postal abbreviations to restrict the result to

    Returns:
        County inventory
    """
    inventory = await client.fetch_county_inventory()

    if states:
        wanted = set(resolve_states(states).values())
        inventory = {
            fips: entry
            for fips, entry in inventory.items()
            if fips.isdigit() and len(fips) == 5 and county_state_fips(fips) in wanted
        }
        logger.info(
            f"Kept {len(inventory)} counties in states {sorted(wanted)}"
        )

    return inventory


async def inventory_states(
    client: FEMAPortalClient,
    states: Optional[Iterable[str]] = None,
) -> Inventory:
    """
    List the effective and preliminary NFHL state files, keyed by 2-digit FIPS.

    Searches the MSC once per state, in FIPS order, within a single portal
    session. States without any NFHL product are left out.

    Args:
        client: Open portal client
        states: Optional postal abbreviations; defaults to all

    Returns:
        State inventory
    """
    selected = resolve_states(states)
    await client.open_msc_session()

    inventory: Inventory = {}
    for abbreviation, fips in selected.items():
        with add_log_context(state=abbreviation, state_fips=fips):
            entry = await client.fetch_state_entry(fips)
            if entry is None:
                logger.warning(f"MSC lists no NFHL state data for {abbreviation} ({fips})")
                continue

            logger.info(
                f"{abbreviation} ({fips}): effective={entry.effective_file_date or '-'} "
                f"preliminary={entry.preliminary_file_date or '-'}"
            )
            inventory[fips] = entry

    logger.info(f"Inventoried {len(inventory)} of {len(selected)} states")
    return inventory
