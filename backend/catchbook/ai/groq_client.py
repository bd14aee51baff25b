"""
Groq API client for image recognition and business advice.

Two request shapes:
1. Image understanding (receipt OCR, fish species / weight): fixed
   instruction prompt + image, JSON mode, validated against a schema.
2. Advice: the user's question plus the current business figures,
   answered in free text.

Every failure (transport, timeout, empty reply, invalid JSON, schema
violation, missing API key) raises AnalysisFailed with the upstream text.
There is no retry and no caching; callers surface the failure and let the
user try again.
"""

import base64
import json
import logging
from abc import ABC, abstractmethod
from typing import Optional, Type, TypeVar

from groq import Groq, APIError
from pydantic import BaseModel, ValidationError

from catchbook.core.config import settings
from catchbook.core.exceptions import AnalysisFailed
from catchbook.ai.analysis_schema import FishAnalysis, ReceiptAnalysis
from catchbook.ai.prompts import (
    ADVICE_SYSTEM_PROMPT,
    FISH_SYSTEM_PROMPT,
    FISH_USER_PROMPT,
    RECEIPT_SYSTEM_PROMPT,
    RECEIPT_USER_PROMPT,
    build_advice_prompt,
)

# Configure logging (NEVER log API keys)
logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class AIClient(ABC):
    """The recognition / advice capability routes depend on."""

    @abstractmethod
    def analyze_fish_image(self, image: bytes, mime_type: str = "image/jpeg") -> FishAnalysis:
        pass

    @abstractmethod
    def analyze_receipt_image(self, image: bytes, mime_type: str = "image/jpeg") -> ReceiptAnalysis:
        pass

    @abstractmethod
    def get_business_advice(self, question: str, business_data: dict) -> str:
        pass


def image_data_url(image: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(image).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_structured_reply(content: Optional[str], schema: Type[SchemaT]) -> SchemaT:
    """Validate a JSON reply against `schema`, raising AnalysisFailed."""
    if not content:
        raise AnalysisFailed("Empty response from model")
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise AnalysisFailed(f"Model returned invalid JSON: {e}") from e
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise AnalysisFailed(f"Model response does not match {schema.__name__}: {e}") from e


class GroqAIClient(AIClient):
    """
    AIClient backed by Groq chat completions.

    - Vision model for images (JSON mode), text model for advice
    - Temperature 0 for recognition, a little higher for advice
    - Transport timeout is the SDK default
    """

    RECOGNITION_TEMPERATURE = 0
    ADVICE_TEMPERATURE = 0.7
    RECOGNITION_MAX_TOKENS = 512
    ADVICE_MAX_TOKENS = 2048

    def __init__(
        self,
        api_key: Optional[str] = None,
        vision_model: Optional[str] = None,
        text_model: Optional[str] = None,
    ):
        """Initialize Groq client with API key from environment unless given."""
        api_key = api_key if api_key is not None else settings.GROQ_API_KEY
        self.vision_model = vision_model or settings.GROQ_VISION_MODEL
        self.text_model = text_model or settings.GROQ_TEXT_MODEL

        if not api_key:
            logger.warning(
                "GROQ_API_KEY not found in environment. "
                "Image analysis and advice will fail until it is set."
            )
            self.client = None
        else:
            self.client = Groq(api_key=api_key)
            logger.info("Groq client initialized")

    def is_available(self) -> bool:
        """Check if Groq client is ready to use."""
        return self.client is not None

    def _complete(self, model: str, messages: list, json_mode: bool, temperature: float, max_tokens: int) -> str:
        if not self.is_available():
            raise AnalysisFailed("GROQ_API_KEY is not configured")

        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                stream=False,
                **kwargs,
            )
        except APIError as e:
            raise AnalysisFailed(str(e)) from e

        if not response.choices:
            raise AnalysisFailed("Empty response from model")
        content = response.choices[0].message.content
        logger.debug(f"Model response received: {len(content or '')} chars")
        return content

    def _analyze_image(self, image: bytes, mime_type: str, system_prompt: str, user_prompt: str,
                       schema: Type[SchemaT]) -> SchemaT:
        messages = [
            {"role": "system", "content": system_prompt},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": user_prompt},
                    {"type": "image_url", "image_url": {"url": image_data_url(image, mime_type)}},
                ],
            },
        ]
        content = self._complete(
            self.vision_model,
            messages,
            json_mode=True,
            temperature=self.RECOGNITION_TEMPERATURE,
            max_tokens=self.RECOGNITION_MAX_TOKENS,
        )
        return parse_structured_reply(content, schema)

    def analyze_fish_image(self, image: bytes, mime_type: str = "image/jpeg") -> FishAnalysis:
        return self._analyze_image(image, mime_type, FISH_SYSTEM_PROMPT, FISH_USER_PROMPT, FishAnalysis)

    def analyze_receipt_image(self, image: bytes, mime_type: str = "image/jpeg") -> ReceiptAnalysis:
        return self._analyze_image(image, mime_type, RECEIPT_SYSTEM_PROMPT, RECEIPT_USER_PROMPT, ReceiptAnalysis)

    def get_business_advice(self, question: str, business_data: dict) -> str:
        messages = [
            {"role": "system", "content": ADVICE_SYSTEM_PROMPT},
            {"role": "user", "content": build_advice_prompt(question, business_data)},
        ]
        content = self._complete(
            self.text_model,
            messages,
            json_mode=False,
            temperature=self.ADVICE_TEMPERATURE,
            max_tokens=self.ADVICE_MAX_TOKENS,
        )
        if not content or not content.strip():
            raise AnalysisFailed("Empty response from model")
        return content
