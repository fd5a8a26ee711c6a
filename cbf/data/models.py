from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# tag -> weight; absent tags are implicitly zero
SparseVector = dict[str, float]


class Rating(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1)
    value: float = Field(..., ge=0.0, le=5.0, allow_inf_nan=False)
    timestamp: int | None = None
