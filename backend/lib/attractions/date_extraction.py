"""Gemini client that reads expiry dates off uploaded documents.

The document bytes go to the model inline together with a fixed instruction
asking for a bare ISO date. The reply is free text; parse_expiry_date() turns
it into a datetime or raises ExpiryDateParseError.

Example usage:
    from backend.lib.attractions.date_extraction import GeminiDateExtractor

    extractor = GeminiDateExtractor(api_key=os.environ["GEMINI_API_KEY"])
    expiry = extractor.extract_expiry_date(pdf_bytes, "application/pdf")
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

import google.generativeai as genai

from backend.lib.attractions.config import get_settings
from backend.lib.attractions.timestamps import ensure_utc

logger = logging.getLogger(__name__)

EXPIRY_DATE_PROMPT = "Extract the expiry date from this document. Return only ISO date (YYYY-MM-DD)."


class ExpiryDateParseError(ValueError):
    """Raised when the model reply is not a usable date."""

    def __init__(self, response_text: str):
        self.response_text = response_text
        super().__init__(f"Could not parse expiry date from model response: {response_text!r}")


def parse_expiry_date(response_text: str) -> datetime:
    """Parse a model reply into an aware UTC datetime.

    Surrounding whitespace is ignored. A bare date ("2025-12-31") becomes
    midnight UTC; a full ISO timestamp is accepted and converted to UTC.

    Args:
        response_text: Raw model output

    Returns:
        Expiry date as a UTC datetime

    Raises:
        ExpiryDateParseError: If the text is not an ISO date or timestamp
    """
    cleaned = response_text.strip()

    try:
        parsed = date.fromisoformat(cleaned)
        return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)
    except ValueError:
        pass

    try:
        return ensure_utc(datetime.fromisoformat(cleaned.replace("Z", "+00:00")))
    except (ValueError, OverflowError):
        raise ExpiryDateParseError(cleaned) from None


class GeminiDateExtractor:
    """Asks a Gemini model for the expiry date printed on a document.

    Attributes:
        model_name: Gemini model name (default: gemini-1.5-flash)
        model: genai.GenerativeModel instance
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        model=None,
    ):
        """Initialize the extractor.

        Args:
            api_key: Gemini API key (defaults to GEMINI_API_KEY setting)
            model_name: Model name (defaults to GEMINI_MODEL setting)
            model: Pre-built model object; skips API configuration

        Raises:
            ValueError: If no model is given and no API key is available
        """
        settings = get_settings()
        self.model_name = model_name or settings.gemini_model

        if model is not None:
            self.model = model
        else:
            api_key = api_key or settings.gemini_api_key
            if not api_key:
                raise ValueError(
                    "Gemini API key required. Provide via api_key parameter or "
                    "GEMINI_API_KEY environment variable."
                )
            genai.configure(api_key=api_key)
            self.model = genai.GenerativeModel(self.model_name)

        logger.info(f"Initialized GeminiDateExtractor: model={self.model_name}")

    def extract_text(self, data: bytes, mime_type: str) -> str:
        """Send a document to the model and return its raw reply.

        Args:
            data: Document bytes (sent inline, base64-encoded by the SDK)
            mime_type: Declared content type of the document

        Returns:
            Model reply text, untrimmed
        """
        logger.info(f"Requesting expiry date from {self.model_name} ({len(data)} bytes, {mime_type})")

        response = self.model.generate_content([
            {"mime_type": mime_type, "data": data},
            EXPIRY_DATE_PROMPT,
        ])

        text = response.text
        logger.debug(f"Model reply: {text!r}")
        return text

    def extract_expiry_date(self, data: bytes, mime_type: str) -> datetime:
        """Extract and parse the expiry date of a document."""
        return parse_expiry_date(self.extract_text(data, mime_type))
