"""Pass-through bridge to chat-completion providers.

The bridge sends Markdown text with a fixed instruction preamble and returns
the provider's reply verbatim. Supported providers are OpenRouter (remote,
API key required) and Ollama (local HTTP server).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import WriterConfig
from .constants import OLLAMA_PROMPT_LIMIT, OPENROUTER_PROMPT_LIMIT
from .exceptions import AssistantError, AssistantNotConfiguredError, PromptTooLargeError

log = logging.getLogger(__name__)

APP_TITLE = "md-writer"


@dataclass(frozen=True)
class AssistantTask:
    """A canned request: system prompt, user prompt template, output suffix."""

    name: str
    suffix: str
    system_prompt: str
    prompt_template: str

    def build_prompt(self, content: str) -> str:
        return self.prompt_template.format(content=content)


SUGGEST = AssistantTask(
    name="suggest",
    suffix="-suggestions",
    system_prompt=(
        "You are a helpful writing assistant. Analyze the given markdown content and suggest "
        "improvements for titles, headings, and overall structure. Focus on:\n"
        "1. Better, more engaging titles\n"
        "2. Clearer headings hierarchy\n"
        "3. Content organization improvements\n"
        "4. Brief summary suggestions\n\n"
        "Provide concise, actionable suggestions in markdown format."
    ),
    prompt_template=(
        "Please analyze this markdown content and suggest improvements:\n\n"
        "```markdown\n{content}\n```\n\n"
        "Provide specific suggestions for better titles, headings, and organization."
    ),
)

GRAMMAR = AssistantTask(
    name="grammar",
    suffix="-corrected",
    system_prompt=(
        "You are a professional editor. Fix grammar, spelling, and improve sentence structure "
        "in the given markdown content. Maintain the original meaning and markdown formatting. "
        "Only fix language issues, don't change the content structure."
    ),
    prompt_template=(
        "Please fix grammar and improve the writing in this markdown content:\n\n"
        "```markdown\n{content}\n```\n\n"
        "Return the corrected markdown with the same structure but improved language."
    ),
)

EXPAND = AssistantTask(
    name="expand",
    suffix="-expanded",
    system_prompt=(
        "You are a content expansion expert. Take the given markdown headings and brief "
        "content, then expand them into more detailed sections with examples, explanations, "
        "and additional context. Maintain the original structure but add substantial value."
    ),
    prompt_template=(
        "Please expand this markdown content by adding more detail, examples, and "
        "explanations to each section:\n\n"
        "```markdown\n{content}\n```\n\n"
        "Add practical examples, detailed explanations, and helpful context while "
        "maintaining the original structure."
    ),
)

TASKS = {task.name: task for task in (SUGGEST, GRAMMAR, EXPAND)}


def build_session() -> Session:
    session = Session()
    retries = Retry(
        total=3,
        backoff_factor=1.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("POST",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _validate_prompt(prompt: str, limit: int) -> None:
    if not isinstance(prompt, str) or not prompt.strip():
        raise AssistantError("Prompt must be a non-empty string")
    if len(prompt) > limit:
        raise PromptTooLargeError(len(prompt), limit)


class Assistant:
    """Send prompts to the configured provider.

    Args:
        config: Provider settings.
        api_key: OpenRouter API key; only required for the remote provider.
        session: HTTP session, built with retries when omitted.
    """

    def __init__(
        self,
        config: WriterConfig,
        api_key: str | None = None,
        session: Session | None = None,
    ):
        self.config = config
        self.api_key = api_key
        self.session = session or build_session()

    @property
    def is_configured(self) -> bool:
        return self.config.provider == "ollama" or bool(self.api_key)

    def generate(self, prompt: str, system_prompt: str = "") -> str:
        """Return the provider's reply to `prompt`.

        Raises:
            AssistantNotConfiguredError: If OpenRouter is selected without a key.
            PromptTooLargeError: If the prompt exceeds the provider limit.
            AssistantError: If the request fails or the reply is malformed.
        """
        if self.config.provider == "ollama":
            return self._call_ollama(prompt, system_prompt)
        return self._call_openrouter(prompt, system_prompt)

    def run(self, task_name: str, content: str) -> str:
        """Run a named task (``suggest``, ``grammar`` or ``expand``) on `content`."""
        try:
            task = TASKS[task_name]
        except KeyError as error:
            raise AssistantError(f"Unknown assistant task: {task_name}") from error
        log.info("Running %s task with provider %s", task.name, self.config.provider)
        return self.generate(task.build_prompt(content), task.system_prompt)

    def suggest_improvements(self, content: str) -> str:
        return self.run(SUGGEST.name, content)

    def fix_grammar(self, content: str) -> str:
        return self.run(GRAMMAR.name, content)

    def expand_content(self, content: str) -> str:
        return self.run(EXPAND.name, content)

    def _call_openrouter(self, prompt: str, system_prompt: str) -> str:
        if not self.api_key:
            raise AssistantNotConfiguredError("API key not configured. Set OPENROUTER_API_KEY.")
        _validate_prompt(prompt, OPENROUTER_PROMPT_LIMIT)

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        payload = {
            "model": self.config.model,
            "messages": messages,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "X-Title": APP_TITLE,
        }

        data = self._post(self.config.api_url, payload, headers, self.config.timeout, "OpenRouter")
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as error:
            raise AssistantError("Invalid response format") from error

    def _call_ollama(self, prompt: str, system_prompt: str) -> str:
        _validate_prompt(prompt, OLLAMA_PROMPT_LIMIT)

        payload = {
            "model": self.config.local_model,
            "prompt": f"{system_prompt}\n\n{prompt}" if system_prompt else prompt,
            "stream": False,
        }
        url = f"{self.config.ollama_base_url.rstrip('/')}/api/generate"

        data = self._post(url, payload, {}, self.config.local_timeout, "Ollama")
        reply = data.get("response") if isinstance(data, dict) else None
        if not reply:
            raise AssistantError("Invalid Ollama response format")
        return reply

    def _post(self, url: str, payload: dict, headers: dict, timeout: int, provider: str) -> object:
        log.debug("POST %s (model %s)", url, payload.get("model"))
        try:
            response = self.session.post(url, json=payload, headers=headers, timeout=timeout)
            response.raise_for_status()
        except requests.Timeout as error:
            raise AssistantError(f"{provider} request timed out") from error
        except requests.RequestException as error:
            raise AssistantError(f"{provider} request failed: {error}") from error

        try:
            return response.json()
        except ValueError as error:
            raise AssistantError(f"Failed to parse {provider} response: {error}") from error
