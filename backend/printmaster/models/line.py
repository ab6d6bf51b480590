from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, computed_field

from printmaster.services.pricing import PriceEngine


class FileDetails(BaseModel):
    file_name: str
    file_url: str
    page_count: int = Field(..., gt=0)
    print_type: Literal["BW", "Color"] = "BW"
    side_type: Literal["Single", "Double"] = "Double"
    binding: Literal["None", "Spiral", "Wire", "Hard"] = "Spiral"


class PricedLine(BaseModel):
    """Fields shared by every cart/order line. ``total_price`` is always derived."""

    name: str
    category: str
    unit_price: float = Field(..., ge=0)
    unit_cost: float = Field(0, ge=0)
    quantity: int = Field(1, ge=1)

    @computed_field
    @property
    def total_price(self) -> float:
        return PriceEngine.line_total(self)


class CatalogLine(PricedLine):
    kind: Literal["catalog"] = "catalog"
    product_id: str
    image: Optional[str] = None

    @property
    def key(self) -> str:
        return self.product_id


class CustomPrintLine(PricedLine):
    kind: Literal["custom_print"] = "custom_print"
    line_id: str
    file_details: FileDetails

    @property
    def key(self) -> str:
        return self.line_id


class ManualLine(PricedLine):
    """Ad-hoc item typed in by staff while entering an order."""

    kind: Literal["manual"] = "manual"
    line_id: str

    @property
    def key(self) -> str:
        return self.line_id


Line = Annotated[Union[CatalogLine, CustomPrintLine, ManualLine], Field(discriminator="kind")]

lines_adapter = TypeAdapter(List[Line])
