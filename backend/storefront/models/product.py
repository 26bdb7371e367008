"""Product catalog query models.

Product payloads come from the external catalog and are passed through
unchanged; only the query parameters are modelled here.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class ProductQuery(BaseModel):
    """Pagination, projection and sorting for catalog listings."""

    limit: Optional[int] = Field(None, ge=0, description="Page size (0 returns everything)")
    skip: Optional[int] = Field(None, ge=0, description="Number of products to skip")
    select: Optional[str] = Field(None, description="Comma-separated product fields to return")
    sortBy: Optional[str] = Field(None, description="Product field to sort by")
    order: Optional[Literal["asc", "desc"]] = None

    def to_params(self) -> dict[str, str]:
        """Catalog query parameters in a stable order, omitting unset values."""
        params: dict[str, str] = {}
        if self.limit is not None:
            params["limit"] = str(self.limit)
        if self.skip is not None:
            params["skip"] = str(self.skip)
        if self.select:
            fields = [field.strip() for field in self.select.split(",") if field.strip()]
            if fields:
                params["select"] = ",".join(fields)
        if self.sortBy:
            params["sortBy"] = self.sortBy
        if self.order:
            params["order"] = self.order
        return params


class ProductSearchQuery(ProductQuery):
    q: str = Field(..., min_length=1, description="Search text")
