"""Google Gemini provider implementation."""

import json
from typing import List, Optional
import google.generativeai as genai
from errors import ExtractionError
from llm.prompts.loader import PromptManager
from llm.providers.base import ExtractionProvider
from models.category import DEFAULT_CATEGORY_NAMES
from models.extraction import ExtractionResult
from models.insight import MAX_INSIGHTS, Insight, InsightsResult
from logger import get_logger

logger = get_logger()


class GeminiProvider(ExtractionProvider):
    """Sends the statement PDF inline and requests a JSON response."""

    name = "gemini"

    def __init__(self, api_key: str, model: Optional[str] = None):
        """Initialize Gemini provider.

        Args:
            api_key: Google AI Studio API key.
            model: Model name. If None, uses the prompt default.
        """
        self.api_key = api_key
        self.model = model
        self.prompt_manager = PromptManager()

    def _build_model(self, rendered_prompt):
        genai.configure(api_key=self.api_key)
        model_name = self.model or rendered_prompt["parameters"].get(
            "gemini_model", "gemini-2.0-flash"
        )
        return model_name, genai.GenerativeModel(
            model_name=model_name,
            system_instruction=rendered_prompt["system_prompt"],
            generation_config={
                "response_mime_type": "application/json",
                "max_output_tokens": rendered_prompt["parameters"].get("max_tokens", 16384),
            },
        )

    def extract_statement(self, document: bytes, filename: str) -> ExtractionResult:
        """Extract statement data using Gemini.

        Gemini occasionally wraps the JSON in a code fence or an array;
        ExtractionResult.from_json handles both.

        Raises:
            ExtractionError: If the response is empty or not valid JSON.
            Exception: If the Gemini API call fails.
        """
        rendered_prompt = self.prompt_manager.render_prompt(
            "statement_extraction",
            {"categories": ", ".join(DEFAULT_CATEGORY_NAMES)},
        )
        model_name, model = self._build_model(rendered_prompt)

        logger.info(f"Calling Gemini ({model_name}) to extract {filename}")

        try:
            response = model.generate_content(
                [
                    {"mime_type": "application/pdf", "data": document},
                    rendered_prompt["user_prompt"],
                ]
            )
            text = response.text
        except ValueError as e:
            # response.text raises ValueError when the candidate has no text part
            raise ExtractionError(f"Gemini returned no text: {e}") from e
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise

        if not text:
            raise ExtractionError("Gemini returned an empty response")

        return ExtractionResult.from_json(text)

    def generate_insights(self, transactions: List[dict]) -> List[Insight]:
        """Ask Gemini for spending insights.

        Raises:
            ExtractionError: If the response is empty or not valid JSON.
            Exception: If the Gemini API call fails.
        """
        rendered_prompt = self.prompt_manager.render_prompt(
            "insights",
            {
                "max_insights": MAX_INSIGHTS,
                "transactions": json.dumps(transactions, ensure_ascii=False, indent=2),
            },
        )
        model_name, model = self._build_model(rendered_prompt)

        logger.info(
            f"Calling Gemini ({model_name}) for insights on {len(transactions)} transaction(s)"
        )

        try:
            text = model.generate_content(rendered_prompt["user_prompt"]).text
        except ValueError as e:
            raise ExtractionError(f"Gemini returned no text: {e}") from e
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise

        if not text:
            raise ExtractionError("Gemini returned an empty response")

        return InsightsResult.from_json(text).insights
