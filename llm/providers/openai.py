"""OpenAI provider implementation using JSON-mode chat completions."""

import base64
import json
from typing import List, Optional
from openai import OpenAI
from errors import ExtractionError
from llm.prompts.loader import PromptManager
from llm.providers.base import ExtractionProvider
from models.category import DEFAULT_CATEGORY_NAMES
from models.extraction import ExtractionResult
from models.insight import MAX_INSIGHTS, Insight, InsightsResult
from logger import get_logger

logger = get_logger()


class OpenAIProvider(ExtractionProvider):
    """Sends the statement PDF as a file part and asks for a JSON object."""

    name = "openai"

    def __init__(self, api_key: str, model: Optional[str] = None, client=None):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key.
            model: Model to use. If None, uses the prompt default.
            client: Optional pre-built client (used by tests).
        """
        self.client = client or OpenAI(api_key=api_key)
        self.model = model
        self.prompt_manager = PromptManager()

    def extract_statement(self, document: bytes, filename: str) -> ExtractionResult:
        """Extract statement data using OpenAI.

        Args:
            document: Raw PDF bytes.
            filename: Original file name.

        Returns:
            Parsed ExtractionResult.

        Raises:
            ExtractionError: If the response is empty or not valid JSON.
            Exception: If the OpenAI API call fails.
        """
        rendered_prompt = self.prompt_manager.render_prompt(
            "statement_extraction",
            {"categories": ", ".join(DEFAULT_CATEGORY_NAMES)},
        )

        model = self.model or rendered_prompt["parameters"].get("model", "gpt-4o-mini")
        max_tokens = rendered_prompt["parameters"].get("max_tokens", 16384)

        logger.info(
            f"Calling OpenAI ({model}, prompt version {rendered_prompt['version']}) "
            f"to extract {filename}"
        )

        encoded = base64.b64encode(document).decode("ascii")

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": rendered_prompt["system_prompt"]},
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "file",
                                "file": {
                                    "filename": filename,
                                    "file_data": f"data:application/pdf;base64,{encoded}",
                                },
                            },
                            {"type": "text", "text": rendered_prompt["user_prompt"]},
                        ],
                    },
                ],
                response_format={"type": "json_object"},
                max_completion_tokens=max_tokens,
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ExtractionError("OpenAI returned an empty response")

        return ExtractionResult.from_json(content)

    def generate_insights(self, transactions: List[dict]) -> List[Insight]:
        """Ask OpenAI for spending insights.

        Raises:
            ExtractionError: If the response is empty or not valid JSON.
            Exception: If the OpenAI API call fails.
        """
        rendered_prompt = self.prompt_manager.render_prompt(
            "insights",
            {
                "max_insights": MAX_INSIGHTS,
                "transactions": json.dumps(transactions, ensure_ascii=False, indent=2),
            },
        )

        model = self.model or rendered_prompt["parameters"].get("model", "gpt-4o-mini")
        max_tokens = rendered_prompt["parameters"].get("max_tokens", 16384)

        logger.info(
            f"Calling OpenAI ({model}) for insights on {len(transactions)} transaction(s)"
        )

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": rendered_prompt["system_prompt"]},
                    {"role": "user", "content": rendered_prompt["user_prompt"]},
                ],
                response_format={"type": "json_object"},
                max_completion_tokens=max_tokens,
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ExtractionError("OpenAI returned an empty response")

        return InsightsResult.from_json(content).insights
