"""
PDSCC AI Client
Thin wrapper around an OpenAI-compatible chat completions API.

Structured calls ask for a JSON object and validate it against a pydantic
schema before anything is returned, so callers get the whole result or an error.
"""

import json
import logging

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from errors import AINotConfiguredError, AIProviderError, FlowValidationError

logger = logging.getLogger(__name__)


class AIClient:
    """Chat completions client built once by the application factory"""

    def __init__(self, api_key: str = None, base_url: str = None, model: str = 'gpt-4o-mini',
                 timeout: float = 60):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client = None

    @classmethod
    def from_settings(cls, settings: dict):
        return cls(
            api_key=settings.get('OPENAI_API_KEY'),
            base_url=settings.get('OPENAI_BASE_URL'),
            model=settings.get('OPENAI_MODEL'),
            timeout=settings.get('OPENAI_TIMEOUT', 60),
        )

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self):
        if not self.is_configured():
            raise AINotConfiguredError('AI generation not configured on server (missing API key)')
        if self._client is None:
            if self.base_url:
                self._client = OpenAI(api_key=self.api_key, base_url=self.base_url, timeout=self.timeout)
            else:
                self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def _create(self, flow_name, messages, temperature, json_mode):
        client = self._get_client()
        kwargs = {
            'model': self.model,
            'messages': messages,
            'temperature': temperature,
        }
        if json_mode:
            kwargs['response_format'] = {"type": "json_object"}

        try:
            completion = client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            logger.error(f"Error calling AI API ({flow_name}): {e}")
            raise AIProviderError(f"Error contacting AI generation service: {e}") from e

        if not completion.choices:
            raise FlowValidationError(flow_name, 'AI response had no choices')

        content = completion.choices[0].message.content
        if not content or not content.strip():
            logger.error(f"AI API returned empty content ({flow_name})")
            raise FlowValidationError(flow_name, 'AI response was empty')
        return content

    def complete_json(self, flow_name: str, system_prompt: str, user_prompt: str, schema,
                      temperature: float = 0.7):
        """
        Run a structured completion and validate it.

        Args:
            flow_name: Name used in logs and error messages
            system_prompt: System message
            user_prompt: User message
            schema: pydantic model class the JSON must satisfy
            temperature: Sampling temperature

        Returns:
            An instance of `schema`

        Raises:
            AINotConfiguredError: No API key
            AIProviderError: Transport or provider failure
            FlowValidationError: Empty, non-JSON or schema-violating output
        """
        content = self._create(
            flow_name,
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            temperature,
            json_mode=True
        )
        logger.info(f"AI content received ({flow_name}): {content[:100]}...")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse AI JSON content: {e}; content={content!r}")
            raise FlowValidationError(flow_name, 'AI response was not valid JSON') from e

        if not isinstance(parsed, dict):
            raise FlowValidationError(flow_name, 'AI response was not a JSON object')

        try:
            return schema.model_validate(parsed)
        except ValidationError as e:
            problems = '; '.join(
                f"{'.'.join(str(p) for p in err['loc']) or 'response'}: {err['msg']}"
                for err in e.errors()
            )
            logger.error(f"AI response failed validation ({flow_name}): {problems}")
            raise FlowValidationError(flow_name, f'AI response did not match the expected format ({problems})') from e

    def complete_text(self, flow_name: str, system_prompt: str, messages, temperature: float = 0.7) -> str:
        """
        Run a free-text completion.

        `messages` is either a single user prompt string or a list of
        {"role", "content"} dicts in OpenAI format.
        """
        if isinstance(messages, str):
            messages = [{"role": "user", "content": messages}]
        content = self._create(
            flow_name,
            [{"role": "system", "content": system_prompt}] + list(messages),
            temperature,
            json_mode=False
        )
        return content.strip()
