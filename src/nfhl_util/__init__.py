"""
nfhl_util - inventory and download FEMA National Flood Hazard Layer files.

Scrapes FEMA's NFHL search portal and Map Service Center to build a
FIPS-keyed inventory of the current NFHL data files, and downloads them
into a local cache.
"""

__version__ = "0.1.0"
