import os
import logging
from typing import Any, Dict, List, Optional
import openai
from dotenv import load_dotenv

from ..logic.contracts import RecommendationBundle
from .prompt_builder import build_system_prompt, build_messages

# Load env vars (if not already loaded)
load_dotenv()

logger = logging.getLogger(__name__)


class EnrollmentAssistant:
    def __init__(self):
        self.api_key = os.getenv("OPENAI_API_KEY")
        self.client = None
        if self.api_key:
            self.client = openai.OpenAI(api_key=self.api_key)

        self.model = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.max_tokens = 500
        self.temperature = 0.3

    @property
    def available(self) -> bool:
        return self.client is not None

    def reply(
        self,
        message: str,
        bundle: RecommendationBundle,
        language: str = "en",
        history: Optional[List[Dict[str, Any]]] = None
    ) -> Optional[str]:
        """
        Generates the assistant's reply to a learner message.
        Returns None if API key is missing or error occurs.
        """
        if not self.client:
            logger.warning("OpenAI API key not found. Skipping assistant reply.")
            return None

        system_prompt = build_system_prompt(bundle, language)
        messages = build_messages(system_prompt, message, history)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )

            content = response.choices[0].message.content
            return content.strip() if content else None

        except openai.OpenAIError as e:
            logger.error(f"Error generating assistant reply for {bundle.request_id}: {e}")
            return None


# Singleton instance
assistant = EnrollmentAssistant()
