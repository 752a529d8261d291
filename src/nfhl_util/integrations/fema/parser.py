"""
Parsers for FEMA NFHL search responses.

Two response shapes are handled:
- the hazards.fema.gov NFHL search result page, an HTML table with one
  download link per county
- the Map Service Center advanced search, a JSON document listing the
  effective and preliminary products for a state
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode, urljoin

from bs4 import BeautifulSoup

from nfhl_util.core.errors import ParseError
from nfhl_util.models.inventory import Inventory, InventoryEntry

logger = logging.getLogger(__name__)


class NFHLResponseParser:
    """Parser for FEMA NFHL county tables and MSC state search results."""

    # e.g. "...&fileName=01001C_20200911.zip" -> ("01001", "20200911")
    COUNTY_FILE_PATTERN = re.compile(r"fileName=(.+?)[cC]_(.+?)\.zip")

    # e.g. "NFHL_12_20231115" -> "20231115"
    PRODUCT_DATE_PATTERN = re.compile(r"_(\d{8})(?:\D|$)")

    EFFECTIVE_SECTION = "EFFECTIVE"
    PRELIMINARY_SECTION = "PRELIMINARY"
    STATE_PRODUCT_TYPE = "NFHL_STATE_DATA"

    def parse_county_table(self, html: str, base_url: str) -> Inventory:
        """
        Build a county inventory from the NFHL search result page.

        Each table row's first link is matched against COUNTY_FILE_PATTERN;
        rows without a link or with a non-matching link are skipped. A
        repeated county key overwrites the earlier row.

        Args:
            html: Search result page body
            base_url: Portal base URL the relative links resolve against

        Returns:
            Inventory keyed by 5-digit county FIPS
        """
        soup = BeautifulSoup(html, "html.parser")

        # html.parser does not synthesize <tbody> like browsers do
        rows = soup.select("tbody tr") or soup.select("tr")

        inventory: Inventory = {}
        skipped = 0
        for row in rows:
            anchor = row.find("a")
            if anchor is None:
                continue

            href = anchor.get("href")
            if not href:
                skipped += 1
                continue

            match = self.COUNTY_FILE_PATTERN.search(href)
            if match is None:
                skipped += 1
                continue

            county_fips, file_date = match.group(1), match.group(2)
            if county_fips in inventory:
                logger.debug(f"Duplicate county {county_fips}, keeping later row")

            inventory[county_fips] = InventoryEntry(
                effective_file_url=urljoin(base_url, href.replace(" ", "%20")),
                effective_file_date=file_date,
            )

        logger.info(
            f"Parsed {len(inventory)} counties from {len(rows)} table rows "
            f"({skipped} links did not match)"
        )
        return inventory

    def parse_state_search(
        self,
        data: Any,
        state_fips: str,
        download_url: str,
    ) -> Optional[InventoryEntry]:
        """
        Extract the newest effective and preliminary state products.

        Args:
            data: Deserialized MSC search response
            state_fips: 2-digit FIPS code the search was for
            download_url: MSC product download servlet URL

        Returns:
            InventoryEntry, or None if both sections list no NFHL state products

        Raises:
            ParseError: If the response does not have the expected shape
        """
        source = f"MSC search {state_fips}"
        if not isinstance(data, dict):
            raise ParseError(
                f"MSC search response for state {state_fips} is not a JSON object",
                source=source,
                details={"type": type(data).__name__},
            )

        # An expired session or server error comes back without either section
        if self.EFFECTIVE_SECTION not in data and self.PRELIMINARY_SECTION not in data:
            raise ParseError(
                f"MSC search response for state {state_fips} has no "
                f"{self.EFFECTIVE_SECTION} or {self.PRELIMINARY_SECTION} section",
                source=source,
                details={"keys": sorted(str(key) for key in data)[:10]},
            )

        effective = self._latest_product(data, self.EFFECTIVE_SECTION, state_fips)
        preliminary = self._latest_product(data, self.PRELIMINARY_SECTION, state_fips)

        if effective is None and preliminary is None:
            return None

        entry = InventoryEntry()
        if effective is not None:
            entry.effective_file_url = self._product_url(download_url, effective)
            entry.effective_file_date = self._product_date(effective)
        if preliminary is not None:
            entry.preliminary_file_url = self._product_url(download_url, preliminary)
            entry.preliminary_file_date = self._product_date(preliminary)

        return entry

    def _section_products(
        self, data: Dict[str, Any], section: str, state_fips: str
    ) -> List[Dict[str, Any]]:
        """Return the state NFHL products listed under one search section."""
        section_data = data.get(section)
        if not section_data:
            return []

        if not isinstance(section_data, dict):
            raise ParseError(
                f"MSC section {section!r} for state {state_fips} is not an object",
                source=f"MSC search {state_fips}",
                details={"section": section},
            )

        products = section_data.get(self.STATE_PRODUCT_TYPE) or []
        if not isinstance(products, list):
            raise ParseError(
                f"MSC {section}.{self.STATE_PRODUCT_TYPE} for state {state_fips} "
                "is not a list",
                source=f"MSC search {state_fips}",
                details={"section": section},
            )

        valid = []
        for product in products:
            if isinstance(product, dict) and product.get("product_ID"):
                valid.append(product)
            else:
                logger.warning(f"Ignoring malformed {section} product: {product!r}")
        return valid

    def _latest_product(
        self, data: Dict[str, Any], section: str, state_fips: str
    ) -> Optional[Dict[str, Any]]:
        products = self._section_products(data, section, state_fips)
        if not products:
            return None
        # YYYYMMDD strings sort chronologically
        return max(products, key=self._product_date)

    def _product_url(self, download_url: str, product: Dict[str, Any]) -> str:
        query = urlencode(
            {
                "productTypeID": "NFHL",
                "productSubTypeID": self.STATE_PRODUCT_TYPE,
                "productID": product["product_ID"],
            }
        )
        return f"{download_url}?{query}"

    def _product_date(self, product: Dict[str, Any]) -> str:
        """
        Date of an MSC product as YYYYMMDD.

        Taken from the product ID or file name; falls back to the
        product_EFFECTIVE_DATE millisecond timestamp.
        """
        for field in ("product_ID", "product_FILE_PATH"):
            value = product.get(field)
            if isinstance(value, str):
                match = self.PRODUCT_DATE_PATTERN.search(value)
                if match:
                    return match.group(1)

        timestamp = product.get("product_EFFECTIVE_DATE")
        if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
            moment = datetime.fromtimestamp(timestamp / 1000.0, tz=timezone.utc)
            return moment.strftime("%Y%m%d")

        return ""
