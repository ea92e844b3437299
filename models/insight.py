"""Typed contract for AI-generated spending insights."""

import json
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from errors import ExtractionError
from models.extraction import clean_json_text

MAX_INSIGHTS = 5


class InsightType(str, Enum):
    TREND = "trend"
    WARNING = "warning"
    TIP = "tip"
    SUBSCRIPTION = "subscription"


class Insight(BaseModel):
    """One observation about the user's spending.

    Attributes:
        type: Kind of insight. Unknown kinds are read as a tip.
        title: Short heading.
        description: Full explanation.
        category: Related category name, if any.
        amount: Related amount, if any.
    """

    model_config = ConfigDict(extra="ignore")

    type: InsightType = InsightType.TIP
    title: str
    description: str
    category: Optional[str] = None
    amount: Optional[float] = None

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_is_tip(cls, value):
        try:
            return InsightType(value)
        except ValueError:
            return InsightType.TIP

    @field_validator("category", mode="before")
    @classmethod
    def _drop_non_text(cls, value):
        return value if isinstance(value, str) else None

    @field_validator("amount", mode="before")
    @classmethod
    def _drop_unparsable_amount(cls, value):
        if isinstance(value, bool):
            return None
        try:
            return float(value) if value is not None else None
        except (TypeError, ValueError):
            return None


class InsightsResult(BaseModel):
    """Insights returned by a provider for one set of transactions."""

    model_config = ConfigDict(extra="ignore")

    insights: List[Insight] = Field(default_factory=list)

    @classmethod
    def from_json(cls, text: str) -> "InsightsResult":
        """Parse a provider response into an InsightsResult.

        Args:
            text: Raw response text from the provider, optionally fenced.

        Returns:
            Parsed InsightsResult.

        Raises:
            ExtractionError: If the text is not JSON or does not match the contract.
        """
        cleaned = clean_json_text(text or "")
        if not cleaned:
            raise ExtractionError("Insights response was empty")

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise ExtractionError(f"JSON parse error: {e}") from e

        if not isinstance(data, dict):
            raise ExtractionError("Insights response is not a JSON object")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ExtractionError(f"Insights response does not match contract: {e}") from e
