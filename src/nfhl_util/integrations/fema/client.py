"""
FEMA NFHL portal client.

Talks to two FEMA web front ends:
- hazards.fema.gov NFHL search portal (county file table, HTML)
- msc.fema.gov Map Service Center (state search, session + JSON)

Requests are issued one at a time. Session cookies set by the MSC are kept
by the underlying httpx client for the lifetime of the FEMAPortalClient.
"""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field

from nfhl_util.core.config import settings
from nfhl_util.core.errors import ParseError, PortalRequestError, StorageError
from nfhl_util.models.inventory import Inventory, InventoryEntry

from .parser import NFHLResponseParser

logger = logging.getLogger(__name__)

# Fields the MSC advanced search form submits for a state-wide search
MSC_SEARCH_FORM: Dict[str, str] = {
    "utf8": "✓",
    "affiliate": "fema",
    "query": "",
    "selstate": "",
    "selcounty": "",
    "selcommunity": "",
    "searchedCid": "",
    "searchedDateStart": "",
    "searchedDateEnd": "",
    "txtstartdate": "",
    "txtenddate": "",
    "method": "search",
}


class FEMAPortalConfig(BaseModel):
    """Configuration for the FEMA portal client."""

    hazards_portal_url: str = Field(
        default_factory=lambda: settings.hazards_portal_url,
        description="Base URL that county download links are relative to",
    )
    county_search_url: str = Field(
        default_factory=lambda: settings.county_search_url,
        description="NFHL county search result page",
    )
    msc_search_url: str = Field(
        default_factory=lambda: settings.msc_search_url,
        description="MSC advanced search form",
    )
    msc_download_url: str = Field(
        default_factory=lambda: settings.msc_download_url,
        description="MSC product download servlet",
    )
    timeout: float = Field(
        default_factory=lambda: settings.request_timeout,
        description="Request timeout in seconds",
        gt=0,
    )
    user_agent: str = Field(default_factory=lambda: settings.user_agent)
    chunk_size: int = Field(default=1024 * 1024, description="Download chunk size", ge=1024)


class FEMAPortalClient:
    """
    Client for FEMA's NFHL search portal and Map Service Center.

    Usage:
        async with FEMAPortalClient() as client:
            counties = await client.fetch_county_inventory()
    """

    def __init__(self, config: Optional[FEMAPortalConfig] = None) -> None:
        self.config = config or FEMAPortalConfig()
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout),
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
        )
        self.parser = NFHLResponseParser()
        self._msc_session_open = False

        logger.debug(
            f"FEMA portal client initialized: hazards={self.config.hazards_portal_url}, "
            f"msc={self.config.msc_search_url}, timeout={self.config.timeout}s"
        )

    async def __aenter__(self) -> "FEMAPortalClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request and raise PortalRequestError on any failure.

        Args:
            method: HTTP method
            url: Absolute URL
            **kwargs: Passed through to httpx

        Returns:
            Successful response
        """
        logger.debug(f"{method} {url}")
        try:
            response = await self.client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PortalRequestError(
                f"{method} {url} returned HTTP {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise PortalRequestError(
                f"{method} {url} failed: {type(e).__name__}: {e}",
                url=url,
            ) from e

        return response

    async def fetch_county_search_page(self) -> str:
        """Download the NFHL county search result page."""
        response = await self._request("GET", self.config.county_search_url)
        logger.info(
            f"Fetched county search page ({len(response.content)} bytes) "
            f"from {self.config.county_search_url}"
        )
        return response.text

    async def fetch_county_inventory(self) -> Inventory:
        """
        Inventory the effective NFHL file of every county.

        Returns:
            Inventory keyed by 5-digit county FIPS
        """
        html = await self.fetch_county_search_page()
        return self.parser.parse_county_table(html, self.config.hazards_portal_url)

    async def open_msc_session(self) -> None:
        """Load the MSC search page so the portal issues its session cookies."""
        await self._request("GET", self.config.msc_search_url)
        self._msc_session_open = True
        logger.info(
            f"MSC session established ({len(self.client.cookies)} cookies)"
        )

    async def search_state(self, state_fips: str) -> Any:
        """
        Run an MSC advanced search for one state.

        Opens the MSC session first if that has not happened yet.

        Args:
            state_fips: 2-digit state FIPS code

        Returns:
            Deserialized JSON search response

        Raises:
            PortalRequestError: If the request fails
            ParseError: If the response is not JSON
        """
        if not self._msc_session_open:
            await self.open_msc_session()

        form = dict(MSC_SEARCH_FORM, selstate=state_fips, searchedCid=state_fips)
        response = await self._request("POST", self.config.msc_search_url, data=form)

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(
                f"MSC search for state {state_fips} did not return JSON",
                source=self.config.msc_search_url,
                details={
                    "content_type": response.headers.get("content-type", ""),
                    "body_start": response.text[:200],
                },
            ) from e

        if isinstance(data, dict):
            logger.debug(f"MSC search for state {state_fips}: sections={sorted(data)}")
        return data

    async def fetch_state_entry(self, state_fips: str) -> Optional[InventoryEntry]:
        """
        Inventory the newest NFHL state products for one state.

        Returns:
            InventoryEntry, or None when the MSC lists no NFHL state product
        """
        data = await self.search_state(state_fips)
        return self.parser.parse_state_search(
            data, state_fips, self.config.msc_download_url
        )

    async def download_file(self, url: str, destination: Path) -> int:
        """
        Stream a file to disk.

        The body is written to a ".part" file next to the destination and
        moved into place once complete; the partial file is removed on
        failure.

        Args:
            url: File URL
            destination: Final path of the file

        Returns:
            Number of bytes written

        Raises:
            PortalRequestError: If the download fails
            StorageError: If the file cannot be written
        """
        temp_path = destination.with_name(destination.name + ".part")
        written = 0

        try:
            async with self.client.stream("GET", url) as response:
                response.raise_for_status()
                with open(temp_path, "wb") as f:
                    async for chunk in response.aiter_bytes(self.config.chunk_size):
                        f.write(chunk)
                        written += len(chunk)
            shutil.move(str(temp_path), str(destination))
        except httpx.HTTPStatusError as e:
            temp_path.unlink(missing_ok=True)
            raise PortalRequestError(
                f"Download of {url} returned HTTP {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            temp_path.unlink(missing_ok=True)
            raise PortalRequestError(
                f"Download of {url} failed: {type(e).__name__}: {e}",
                url=url,
            ) from e
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise StorageError(
                f"Could not write {destination}: {e}", path=str(destination)
            ) from e

        logger.info(f"Downloaded {url} -> {destination} ({written} bytes)")
        return written
