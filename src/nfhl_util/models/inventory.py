"""
Pydantic models for NFHL file inventories.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class InventoryEntry(BaseModel):
    """
    Current NFHL data files for one state or county.

    Dates are the YYYYMMDD stamps FEMA embeds in its file names. A field is
    the empty string when FEMA has no such product for the unit.

    Attributes:
        effective_file_url: Download URL of the effective NFHL file
        effective_file_date: Effective date of that file
        preliminary_file_url: Download URL of the preliminary NFHL file
        preliminary_file_date: Date of that file
    """

    effective_file_url: str = Field(default="", description="Effective NFHL file URL")
    effective_file_date: str = Field(default="", description="Effective date (YYYYMMDD)")
    preliminary_file_url: str = Field(default="", description="Preliminary NFHL file URL")
    preliminary_file_date: str = Field(default="", description="Preliminary date (YYYYMMDD)")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "effective_file_url": (
                    "https://hazards.fema.gov/femaportal/NFHL/Download/"
                    "ProductsDownLoadServlet?DFIRMID=01001C&state=ALABAMA"
                    "&county=AUTAUGA%20COUNTY&fileName=01001C_20200911.zip"
                ),
                "effective_file_date": "20200911",
                "preliminary_file_url": "",
                "preliminary_file_date": "",
            }
        },
    )

    @property
    def has_effective_file(self) -> bool:
        """Whether an effective file is inventoried."""
        return bool(self.effective_file_url)

    @property
    def has_preliminary_file(self) -> bool:
        """Whether a preliminary file is inventoried."""
        return bool(self.preliminary_file_url)


# Keyed by 2-digit state FIPS or 5-digit county FIPS
Inventory = Dict[str, InventoryEntry]
