from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class ZipRecord:
    """One row of the ZIP code table."""

    zip: str
    city: str
    state_id: str
    state_name: str
    county_name: str
    county_fips: str


@dataclass
class SearchCandidate:
    """A single web search hit for the property address."""

    url: str
    content: str = ""
    title: str = ""
    raw_content: Optional[str] = None
    score: float = 0.0

    @property
    def best_content(self) -> str:
        return self.raw_content or self.content


class TransactionRecord(BaseModel):
    """A sale transaction parsed from an Ownership History table."""

    model_config = ConfigDict(populate_by_name=True)

    sale_date: date = Field(alias="saleDate", description="Sale date, YYYY-MM-DD")
    sale_price: str = Field(alias="salePrice", description="Sale price such as $1,250,000")
    buyer: str = Field(default="", description="Owner recorded by the sale")
    seller: str = Field(default="", description="Previous owner in the chronological sequence")

    @field_validator("sale_price", mode="before")
    @classmethod
    def format_price(cls, value: Union[str, int, float, None]) -> str:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"${value:,.0f}"
        return str(value).strip()

    @field_validator("buyer", "seller", mode="before")
    @classmethod
    def blank_names(cls, value):
        return "" if value is None else str(value).strip()


class SearchResult(BaseModel):
    """Response payload: location of the ZIP code plus its transactions."""

    model_config = ConfigDict(populate_by_name=True)

    zipcode: str
    city: str
    county: str
    state: str
    state_id: str
    county_fips: str
    search_url: str = Field(alias="searchUrl")
    transactions: List[TransactionRecord] = []

    @classmethod
    def from_record(
        cls,
        zipcode: str,
        record: ZipRecord,
        search_url: str,
        transactions: List[TransactionRecord],
    ) -> "SearchResult":
        return cls(
            zipcode=zipcode,
            city=record.city,
            county=record.county_name,
            state=record.state_name,
            state_id=record.state_id,
            county_fips=record.county_fips,
            search_url=search_url,
            transactions=list(transactions),
        )

    def to_payload(self) -> dict:
        """JSON-ready dict with the wire (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


class ErrorResponse(BaseModel):
    error: str
