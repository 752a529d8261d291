"""
Download inventoried NFHL files into a local cache directory.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from nfhl_util.core.errors import StorageError
from nfhl_util.core.storage import cache_filename
from nfhl_util.integrations.fema.client import FEMAPortalClient
from nfhl_util.models.inventory import Inventory

logger = logging.getLogger(__name__)


@dataclass
class DownloadReport:
    """Outcome of a download_all run, as lists of inventory keys."""

    downloaded: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    missing_url: List[str] = field(default_factory=list)
    bytes_written: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "downloaded": len(self.downloaded),
            "skipped": len(self.skipped),
            "missing_url": len(self.missing_url),
            "bytes_written": self.bytes_written,
        }


async def download_all(
    inventory: Inventory,
    cache_dir: Path,
    client: FEMAPortalClient,
) -> DownloadReport:
    """
    Fetch the effective file of every inventory entry into cache_dir.

    Entries are processed in key order. A file already present in the cache
    is not fetched again; FEMA file names carry the effective date, so a new
    release gets a new name. The first failed download aborts the run.

    Args:
        inventory: Inventory to download
        cache_dir: Cache directory (created if needed)
        client: Open portal client

    Returns:
        DownloadReport

    Raises:
        PortalRequestError: If a download fails
        StorageError: If the cache directory cannot be used
    """
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Cannot create cache directory: {e}", path=str(cache_dir)) from e

    report = DownloadReport()
    for key in sorted(inventory):
        entry = inventory[key]
        if not entry.has_effective_file:
            logger.debug(f"{key}: no effective file, skipping")
            report.missing_url.append(key)
            continue

        destination = cache_dir / cache_filename(entry.effective_file_url)
        if destination.exists():
            logger.debug(f"{key}: {destination.name} already cached")
            report.skipped.append(key)
            continue

        report.bytes_written += await client.download_file(
            entry.effective_file_url, destination
        )
        report.downloaded.append(key)

    logger.info(
        f"Download finished: {len(report.downloaded)} downloaded, "
        f"{len(report.skipped)} already cached, "
        f"{len(report.missing_url)} without effective file"
    )
    return report
