import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import os
import re
import logging
from dataclasses import replace
from typing import Dict, List, Optional
from core.models import Article

logger = logging.getLogger(__name__)

ARABIC_RE = re.compile(r"[\u0600-\u06FF]")

TRANSIENT_ERRORS = (
    google_exceptions.ResourceExhausted,
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
)

class GeminiTranslator:
    def __init__(self, api_key: Optional[str] = None, model_name: str = "gemini-2.0-flash"):
        # Load all available API keys
        self.api_keys: List[str] = [api_key] if api_key else []
        for i in range(1, 10):
            key_name = "GEMINI_API_KEY" if i == 1 else f"GEMINI_API_KEY_{i}"
            key = os.getenv(key_name)
            if key and key not in self.api_keys:
                self.api_keys.append(key)

        self.cache: Dict[str, str] = {}
        self.model_name = model_name

        if not self.api_keys:
            logger.warning("No GEMINI_API_KEY found. Translation will be disabled.")
            self.model = None
        else:
            logger.info(f"Loaded {len(self.api_keys)} API key(s), Model: {model_name}")
            genai.configure(api_key=self.api_keys[0])
            self.model = genai.GenerativeModel(
                model_name,
                generation_config={"temperature": 0.3, "max_output_tokens": 500},
            )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _generate(self, prompt: str) -> str:
        response = await self.model.generate_content_async(prompt)
        return response.text

    async def translate_to_arabic(self, text: str) -> str:
        """
        Translate text to Arabic. Returns the original text when translation
        is disabled, the text already looks Arabic, or the API fails.
        """
        if not text:
            return text

        cache_key = text[:100]
        if cache_key in self.cache:
            return self.cache[cache_key]

        if ARABIC_RE.search(text[:20]):
            return text

        if not self.model:
            return text

        prompt = f'Translate the following text to Arabic. Return ONLY the Arabic translation, nothing else:\n\n"{text}"'
        try:
            translated = (await self._generate(prompt)).strip()
        except Exception as e:
            logger.warning(f"Translation failed: {str(e)[:100]}")
            return text

        if not translated:
            return text

        # Remove quotes if they wrap the translation
        cleaned = re.sub(r'^["\']|["\']$', "", translated).strip()
        self.cache[cache_key] = cleaned
        return cleaned

    async def translate_article(self, article: Article) -> Article:
        title = await self.translate_to_arabic(article.title)
        excerpt = await self.translate_to_arabic(article.excerpt)
        return replace(article, title=title, excerpt=excerpt)
