from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class AirportSearchResponse(BaseModel):
    cities: List[str] = Field(default_factory=list, description="Distinct cities of the returned airports")
    count: int = Field(..., description="Number of airport records returned")
    airports: List[Optional[Dict[str, Any]]] = Field(
        default_factory=list, description="Stored upstream airport records (null when not crawled yet)"
    )


class HealthOut(BaseModel):
    status: str
    airports: int
