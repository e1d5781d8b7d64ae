# File: backend/app/llm/openai_client.py
import json
import httpx
from typing import Dict, Any, List, Optional
import logging

from app.core.config import settings
from app.llm.prompt_builder import build_job_info_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIError(Exception):
    """Raised when the OpenAI API returns an error or cannot be reached."""


class OpenAIClient:
    def __init__(self, api_key: str, model: Optional[str] = None, base_url: Optional[str] = None):
        if not api_key:
            raise ValueError("OpenAI API key is required")

        self.api_key = api_key
        self.model = model or settings.OPENAI_MODEL or DEFAULT_MODEL
        self.base_url = (base_url or settings.OPENAI_BASE_URL).rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        logger.info(f"Initialized OpenAIClient with model: {self.model}")

    async def _send_request(
        self,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """Send a chat completion request and return the first choice's content."""
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            body["max_tokens"] = max_tokens
        if json_mode:
            body["response_format"] = {"type": "json_object"}

        logger.info(f"Sending request to OpenAI API with model: {self.model}")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=self.headers,
                    json=body,
                    timeout=120.0,
                )
        except httpx.HTTPError as e:
            logger.error(f"Error in OpenAI API request: {str(e)}")
            raise OpenAIError(f"OpenAI request failed: {e}")

        if response.status_code != 200:
            logger.error(f"API request failed with status code {response.status_code}: {response.text}")
            raise OpenAIError(f"OpenAI request failed with status code {response.status_code}: {response.text}")

        result = response.json()
        choices = result.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        logger.info(f"Received response from OpenAI API (first 100 chars): {content[:100]}...")
        return content

    async def extract_job_info(self, job_description: str) -> Dict[str, str]:
        """
        Extract company, title and job id from a job description.

        Never raises: any transport or parse failure yields empty strings.
        """
        info = {"company": "", "title": "", "id": ""}
        try:
            raw = await self._send_request(
                [{"role": "user", "content": build_job_info_prompt(job_description)}],
                temperature=0,
                max_tokens=200,
                json_mode=True,
            )
            parsed = json.loads(raw)
        except (OpenAIError, json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Could not extract job info, continuing without it: {e}")
            return info

        if not isinstance(parsed, dict):
            return info
        for key in info:
            value = parsed.get(key)
            info[key] = value if isinstance(value, str) else ""
        return info

    async def generate_latex(self, prompt_text: str) -> str:
        """Produce the tailored LaTeX resume for a composed prompt."""
        return await self._send_request(
            [{"role": "user", "content": prompt_text}],
            temperature=0.4,
        )

    async def list_models(self) -> List[str]:
        """List model ids visible to the key. Used to test a key."""
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self.base_url}/models",
                    headers=self.headers,
                    timeout=30.0,
                )
        except httpx.HTTPError as e:
            raise OpenAIError(f"OpenAI request failed: {e}")

        if response.status_code != 200:
            raise OpenAIError(response.text or "Connection failed.")
        return [item.get("id", "") for item in response.json().get("data", [])]
