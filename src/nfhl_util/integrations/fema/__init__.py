"""
FEMA National Flood Hazard Layer (NFHL) portal integration.

Scrapes FEMA's NFHL search portal and Map Service Center to find the
current NFHL data file for every county and state.
"""

from .client import FEMAPortalClient, FEMAPortalConfig
from .parser import NFHLResponseParser

__all__ = ["FEMAPortalClient", "FEMAPortalConfig", "NFHLResponseParser"]
