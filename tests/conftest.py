"""
Shared sample FEMA responses and logging isolation for the test suite.
"""

import logging
from typing import Any, Dict, Iterator

import pytest

COUNTY_SEARCH_URL = "https://hazards.fema.gov/femaportal/NFHL/searchResult"
MSC_SEARCH_URL = "https://msc.fema.gov/portal/advanceSearch"
MSC_DOWNLOAD_URL = "https://msc.fema.gov/portal/downloadProduct"

COUNTY_SEARCH_HTML = """
<html>
<body>
<table id="searchResultTable">
  <thead>
    <tr><th>State</th><th>County</th><th>Effective Date</th><th>Download</th></tr>
  </thead>
  <tbody>
    <tr>
      <td>ALABAMA</td><td>AUTAUGA COUNTY</td><td>09/11/2020</td>
      <td><a href="Download/ProductsDownLoadServlet?DFIRMID=01001C&amp;state=ALABAMA&amp;county=AUTAUGA%20COUNTY&amp;fileName=01001C_20200911.zip">01001C_20200911.zip</a></td>
    </tr>
    <tr>
      <td>ALABAMA</td><td>BALDWIN COUNTY</td><td>06/17/2019</td>
      <td><a href="Download/ProductsDownLoadServlet?DFIRMID=01003C&amp;state=ALABAMA&amp;county=BALDWIN%20COUNTY&amp;fileName=01003c_20190617.zip">01003c_20190617.zip</a></td>
    </tr>
    <tr>
      <td>FLORIDA</td><td>ALACHUA COUNTY</td><td>09/02/2021</td>
      <td><a href="Download/ProductsDownLoadServlet?DFIRMID=12001C&amp;state=FLORIDA&amp;county=ALACHUA%20COUNTY&amp;fileName=12001C_20210902.zip">12001C_20210902.zip</a></td>
    </tr>
    <tr>
      <td>FLORIDA</td><td>STATEWIDE</td><td>09/02/2021</td>
      <td><a href="Download/ProductsDownLoadServlet?fileName=NFHL_12_20210902.zip">NFHL_12_20210902.zip</a></td>
    </tr>
    <tr>
      <td>GEORGIA</td><td>APPLING COUNTY</td><td></td><td>Pending</td>
    </tr>
  </tbody>
</table>
</body>
</html>
"""

MSC_FLORIDA_RESPONSE: Dict[str, Any] = {
    "EFFECTIVE": {
        "FIRM_PANELS": [],
        "NFHL_STATE_DATA": [
            {
                "product_ID": "NFHL_12_20230815",
                "product_FILE_PATH": "NFHL_12_20230815.zip",
                "product_EFFECTIVE_DATE": 1692057600000,
            },
            {
                "product_ID": "NFHL_12_20231115",
                "product_FILE_PATH": "NFHL_12_20231115.zip",
                "product_EFFECTIVE_DATE": 1700006400000,
            },
        ],
    },
    "PRELIMINARY": {
        "NFHL_STATE_DATA": [
            {
                "product_ID": "NFHL_12_20240301_PRELIM",
                "product_FILE_PATH": "NFHL_12_20240301_PRELIM.zip",
            }
        ]
    },
}

MSC_EMPTY_RESPONSE: Dict[str, Any] = {
    "EFFECTIVE": {"FIRM_PANELS": [], "NFHL_STATE_DATA": []},
    "PRELIMINARY": {},
}


@pytest.fixture
def county_search_html() -> str:
    return COUNTY_SEARCH_HTML


@pytest.fixture
def msc_florida_response() -> Dict[str, Any]:
    return MSC_FLORIDA_RESPONSE


@pytest.fixture
def msc_empty_response() -> Dict[str, Any]:
    return MSC_EMPTY_RESPONSE


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo handler changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
