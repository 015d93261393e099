from openai import OpenAI
import google.generativeai as genai
from relateai.config import settings
import logging
import json
import re
from typing import Optional

logger = logging.getLogger(__name__)

_JSON_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AIServiceError(Exception):
    """The language model could not be reached or returned something unusable."""


def parse_json_response(text: str) -> dict:
    """Pull a JSON object out of a model reply (fenced block, bare object, or whole text)."""
    text = (text or "").strip()
    match = _JSON_BLOCK.search(text)
    if match:
        text = match.group(1)
    else:
        match = _JSON_OBJECT.search(text)
        if match:
            text = match.group(0)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise AIServiceError(f"Model returned invalid JSON: {e}")
    if not isinstance(data, dict):
        raise AIServiceError("Model returned JSON that is not an object")
    return data


class AIService:
    """
    Thin wrapper over the configured LLM provider.
    Gemini when GEMINI_API_KEY is set, otherwise OpenAI. Without either key
    every call raises AIServiceError and callers use their fallbacks.
    """

    def __init__(self, gemini_api_key: Optional[str] = None, openai_api_key: Optional[str] = None, model: Optional[str] = None):
        self.provider = None
        self.client = None
        self.model = model or settings.AI_MODEL
        gemini_api_key = gemini_api_key if gemini_api_key is not None else settings.GEMINI_API_KEY
        openai_api_key = openai_api_key if openai_api_key is not None else settings.OPENAI_API_KEY

        if gemini_api_key:
            try:
                genai.configure(api_key=gemini_api_key)
                self.client = genai.GenerativeModel(self.model)
                self.provider = "gemini"
                logger.info("AI Service initialized with Gemini")
            except Exception as e:
                logger.error(f"Failed to initialize Gemini: {e}")

        if not self.client and openai_api_key:
            try:
                self.client = OpenAI(api_key=openai_api_key)
                self.provider = "openai"
                logger.info("AI Service initialized with OpenAI")
            except Exception as e:
                logger.error(f"Failed to initialize OpenAI: {e}")

    def _generate_content(self, prompt: str) -> str:
        """Generate a JSON completion from whichever provider is configured."""
        if not self.client:
            raise AIServiceError("AI client not initialized")

        try:
            if self.provider == "gemini":
                response = self.client.generate_content(prompt)
                return response.text.strip()

            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.2,
                response_format={"type": "json_object"}
            )
            return (response.choices[0].message.content or "").strip()
        except Exception as e:
            logger.error(f"{self.provider} generation failed: {e}")
            raise AIServiceError(str(e))

    def generate_json(self, prompt: str) -> dict:
        """Ask for a JSON object and parse it."""
        return parse_json_response(self._generate_content(prompt))


_ai_service: Optional[AIService] = None


def get_ai_service() -> AIService:
    """Get the AI service instance."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
