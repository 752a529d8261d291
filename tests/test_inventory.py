"""
Tests for county and state inventory building.
"""

from typing import Any, Callable, Dict
from urllib.parse import parse_qs

import httpx
import pytest
import respx

from nfhl_util.core.errors import ParseError, PortalRequestError, ValidationError
from nfhl_util.core.inventory import inventory_counties, inventory_states
from nfhl_util.integrations.fema.client import FEMAPortalClient

COUNTY_SEARCH_URL = "https://hazards.fema.gov/femaportal/NFHL/searchResult"
MSC_SEARCH_URL = "https://msc.fema.gov/portal/advanceSearch"


def _msc_by_state(
    responses: Dict[str, Dict[str, Any]],
) -> Callable[[httpx.Request], httpx.Response]:
    """Build a respx side effect answering MSC searches per selstate."""
    def handler(request: httpx.Request) -> httpx.Response:
        state = parse_qs(request.content.decode())["selstate"][0]
        return httpx.Response(200, json=responses.get(state, {"EFFECTIVE": {}}))

    return handler


class TestInventoryCounties:
    """Tests for inventory_counties."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_all_counties(self, county_search_html: str) -> None:
        """Test every matching county is inventoried."""
        respx.get(COUNTY_SEARCH_URL).mock(
            return_value=httpx.Response(200, text=county_search_html)
        )

        async with FEMAPortalClient() as client:
            inventory = await inventory_counties(client)

        assert sorted(inventory) == ["01001", "01003", "12001"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_state_filter(self, county_search_html: str) -> None:
        """Test counties are restricted to the requested states."""
        respx.get(COUNTY_SEARCH_URL).mock(
            return_value=httpx.Response(200, text=county_search_html)
        )

        async with FEMAPortalClient() as client:
            inventory = await inventory_counties(client, ["al"])

        assert sorted(inventory) == ["01001", "01003"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_unknown_state_filter(self, county_search_html: str) -> None:
        """Test an unknown state abbreviation is rejected."""
        respx.get(COUNTY_SEARCH_URL).mock(
            return_value=httpx.Response(200, text=county_search_html)
        )

        async with FEMAPortalClient() as client:
            with pytest.raises(ValidationError):
                await inventory_counties(client, ["ZZ"])


class TestInventoryStates:
    """Tests for inventory_states."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_selected_states(
        self,
        msc_florida_response: Dict[str, Any],
        msc_empty_response: Dict[str, Any],
    ) -> None:
        """Test states with products are keyed by FIPS; empty ones are left out."""
        session_route = respx.get(MSC_SEARCH_URL).mock(return_value=httpx.Response(200))
        search_route = respx.post(MSC_SEARCH_URL).mock(
            side_effect=_msc_by_state(
                {"12": msc_florida_response, "68": msc_empty_response}
            )
        )

        async with FEMAPortalClient() as client:
            inventory = await inventory_states(client, ["MH", "FL"])

        assert list(inventory) == ["12"]
        assert inventory["12"].effective_file_date == "20231115"
        assert inventory["12"].preliminary_file_date == "20240301"

        assert session_route.call_count == 1
        assert search_route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_states_searched_in_fips_order(
        self, msc_empty_response: Dict[str, Any]
    ) -> None:
        """Test searches are issued in FIPS order over the whole table."""
        respx.get(MSC_SEARCH_URL).mock(return_value=httpx.Response(200))
        search_route = respx.post(MSC_SEARCH_URL).mock(
            return_value=httpx.Response(200, json=msc_empty_response)
        )

        async with FEMAPortalClient() as client:
            inventory = await inventory_states(client)

        assert inventory == {}
        assert search_route.call_count == 58

        searched = [
            parse_qs(call.request.content.decode())["selstate"][0]
            for call in search_route.calls
        ]
        assert searched == sorted(searched)
        assert searched[0] == "01"
        assert searched[-1] == "78"

    @pytest.mark.asyncio
    @respx.mock
    async def test_failure_aborts(self, msc_florida_response: Dict[str, Any]) -> None:
        """Test a failed state search aborts the whole inventory."""
        respx.get(MSC_SEARCH_URL).mock(return_value=httpx.Response(200))
        respx.post(MSC_SEARCH_URL).mock(
            side_effect=[
                httpx.Response(200, json=msc_florida_response),
                httpx.Response(500),
            ]
        )

        async with FEMAPortalClient() as client:
            with pytest.raises(PortalRequestError):
                await inventory_states(client, ["FL", "GA"])

    @pytest.mark.asyncio
    @respx.mock
    async def test_session_error_payload_aborts(self) -> None:
        """Test an MSC error object is not mistaken for a state without products."""
        respx.get(MSC_SEARCH_URL).mock(return_value=httpx.Response(200))
        respx.post(MSC_SEARCH_URL).mock(
            return_value=httpx.Response(200, json={"error": "Session expired"})
        )

        async with FEMAPortalClient() as client:
            with pytest.raises(ParseError):
                await inventory_states(client, ["FL"])
