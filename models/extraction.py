"""Typed contract for the JSON document produced by the AI extraction step.

Optional fields are lenient: a value of the wrong type is dropped to None
so that the normalizer applies its defaults instead of rejecting the whole
statement.
"""

import json
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from errors import ExtractionError

_NON_DIGITS = re.compile(r"[^0-9]")


def _text_or_none(value):
    return value if isinstance(value, str) else None


class CardInfo(BaseModel):
    """Card details printed on the statement."""

    model_config = ConfigDict(extra="ignore")

    bank: Optional[str] = None
    card_name: Optional[str] = None
    last_four: Optional[str] = None

    @field_validator("bank", "card_name", mode="before")
    @classmethod
    def _drop_non_text(cls, value):
        return _text_or_none(value)

    @field_validator("last_four", mode="before")
    @classmethod
    def _normalize_last_four(cls, value):
        # Models return the digits as a number or with the masked prefix
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            value = f"{value:04d}"
        if not isinstance(value, str):
            return None
        return _NON_DIGITS.sub("", value)[-4:] or None


class StatementInfo(BaseModel):
    """Statement header fields. Dates are YYYY-MM-DD strings."""

    model_config = ConfigDict(extra="ignore")

    period_start: Optional[str] = None
    period_end: Optional[str] = None
    total_amount: Optional[float] = None
    min_payment: Optional[float] = None
    due_date: Optional[str] = None

    @field_validator("period_start", "period_end", "due_date", mode="before")
    @classmethod
    def _drop_non_text_date(cls, value):
        return _text_or_none(value)

    @field_validator("total_amount", "min_payment", mode="before")
    @classmethod
    def _drop_unparsable_amount(cls, value):
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return None
        return None


class ExtractedTransaction(BaseModel):
    """One statement line item."""

    model_config = ConfigDict(extra="ignore")

    date: Optional[str] = None
    description: str
    merchant: Optional[str] = None
    amount: float
    category: Optional[str] = None

    @field_validator("date", "merchant", "category", mode="before")
    @classmethod
    def _drop_non_text(cls, value):
        return _text_or_none(value)


class ExtractionResult(BaseModel):
    """Full extraction result for one statement document."""

    model_config = ConfigDict(extra="ignore")

    card_info: CardInfo = Field(default_factory=CardInfo)
    statement_info: StatementInfo = Field(default_factory=StatementInfo)
    transactions: List[ExtractedTransaction] = Field(default_factory=list)

    _raw_json: Optional[str] = PrivateAttr(default=None)

    @property
    def raw_json(self) -> str:
        """The payload exactly as received, or this model serialized."""
        if self._raw_json is not None:
            return self._raw_json
        return self.model_dump_json()

    @classmethod
    def from_json(cls, text: str) -> "ExtractionResult":
        """Parse a provider response into an ExtractionResult.

        Markdown code fences around the JSON are removed. If the document is
        a JSON array, its first element is used.

        Args:
            text: Raw response text from the provider.

        Returns:
            Parsed ExtractionResult keeping the cleaned text as raw_json.

        Raises:
            ExtractionError: If the text is not JSON or does not match the contract.
        """
        cleaned = clean_json_text(text or "")
        if not cleaned:
            raise ExtractionError("Extraction response was empty")

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise ExtractionError(f"JSON parse error: {e}") from e

        if isinstance(data, list):
            if not data:
                raise ExtractionError("Extraction response was an empty array")
            data = data[0]
            cleaned = json.dumps(data, ensure_ascii=False)

        if not isinstance(data, dict):
            raise ExtractionError("Extraction response is not a JSON object")

        try:
            result = cls.model_validate(data)
        except ValidationError as e:
            raise ExtractionError(f"Extraction response does not match contract: {e}") from e

        result._raw_json = cleaned
        return result


def clean_json_text(text: str) -> str:
    """Strip surrounding whitespace and Markdown code fences."""
    content = text.strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()
