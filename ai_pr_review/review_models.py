from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReviewSuggestion(BaseModel):
    """One line comment as the model returns it."""

    model_config = ConfigDict(populate_by_name=True)

    line_number: str = Field(..., alias="lineNumber")
    review_comment: str = Field(..., alias="reviewComment")

    @field_validator("line_number", mode="before")
    @classmethod
    def coerce_line_number(cls, value):
        if value is None:
            raise ValueError("lineNumber is required")
        return str(value)


class ReviewResponse(BaseModel):
    reviews: List[ReviewSuggestion]


class ReviewComment(BaseModel):
    """Inline comment in the shape the pull request review API expects."""

    body: str
    path: str
    line: int
