"""
Multi-Provider LLM Wrapper

Abstracts away differences between Anthropic (Claude) and OpenAI (GPT).
Provides one consistent interface for the Text Analysis Service.

Design decisions:
- Task complexity determines model choice (tiers configured in config.yaml)
- Optional fallback to the other provider when the primary call fails
- No retries here: callers fall back to documented defaults instead
- Clients are created on first use, so a tier that is never used never
  needs its API key
"""

import os
from typing import List, Dict, Any, Optional, Literal

from dotenv import load_dotenv

from anthropic import Anthropic, APIError as AnthropicAPIError
from openai import OpenAI, APIError as OpenAIAPIError

# Load environment variables
load_dotenv()


class LLMProvider:
    """
    Multi-provider LLM wrapper supporting Claude and GPT.

    Why wrap instead of using clients directly?
    - Consistent interface across models
    - Easy model switching (config change, not code change)
    - Centralized error handling and fallback
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize LLM provider with configuration.

        Args:
            config: Configuration dict (from config.yaml)
        """
        self.config = config

        # Extract model configs
        self.complex_model_config = self.config['llm']['complex_model']
        self.simple_model_config = self.config['llm']['simple_model']
        self.fallback_enabled = self.config['llm'].get('fallback_enabled', False)

        self._anthropic_client: Optional[Anthropic] = None
        self._openai_client: Optional[OpenAI] = None

    @property
    def anthropic_client(self) -> Anthropic:
        if self._anthropic_client is None:
            self._anthropic_client = Anthropic(api_key=os.getenv("ANTHROPIC_API_KEY"))
        return self._anthropic_client

    @property
    def openai_client(self) -> OpenAI:
        if self._openai_client is None:
            self._openai_client = OpenAI(api_key=os.getenv("OPENAI_API_KEY"))
        return self._openai_client

    def generate(
        self,
        messages: List[Dict[str, str]],
        task_complexity: Literal["simple", "complex"] = "simple",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False
    ) -> Dict[str, Any]:
        """
        Generate a response using the appropriate model.

        This is the main entry point for all LLM calls.

        Args:
            messages: List of message dicts with 'role' and 'content'
            task_complexity: "simple" or "complex" model tier
            temperature: Override default temperature
            max_tokens: Override default max tokens
            json_mode: Ask the provider for a bare JSON object where supported

        Returns:
            Response dict with 'content', 'model', 'provider', 'usage'

        Raises:
            Exception: If the call (and the fallback, when enabled) fails
        """
        # Select model config
        if task_complexity == "complex":
            model_config = self.complex_model_config
        else:
            model_config = self.simple_model_config
        provider = model_config['provider']

        # Override defaults if specified
        temperature = temperature if temperature is not None else model_config.get('temperature', 0.3)
        max_tokens = max_tokens if max_tokens is not None else model_config.get('max_tokens', 2048)

        try:
            return self._dispatch(
                provider=provider,
                model=model_config['model'],
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=json_mode
            )

        except (AnthropicAPIError, OpenAIAPIError) as e:
            print(f"LLM API error ({provider}): {e}")

            if self.fallback_enabled:
                return self._try_fallback(
                    messages=messages,
                    failed_provider=provider,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    json_mode=json_mode
                )
            raise

    def _dispatch(
        self,
        provider: str,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
        json_mode: bool
    ) -> Dict[str, Any]:
        if provider == "anthropic":
            return self._generate_anthropic(messages, model, temperature, max_tokens)
        elif provider == "openai":
            return self._generate_openai(messages, model, temperature, max_tokens, json_mode)
        else:
            raise ValueError(f"Unknown provider: {provider}")

    def _generate_anthropic(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float,
        max_tokens: int
    ) -> Dict[str, Any]:
        """
        Generate using Anthropic Claude.

        Returns standardized response format.
        """
        # Separate system message if present
        system_message = None
        api_messages = []

        for msg in messages:
            if msg['role'] == 'system':
                system_message = msg['content']
            else:
                api_messages.append({
                    'role': msg['role'],
                    'content': msg['content']
                })

        # Build API call parameters
        params = {
            'model': model,
            'messages': api_messages,
            'temperature': temperature,
            'max_tokens': max_tokens
        }

        if system_message:
            params['system'] = system_message

        # Call API
        response = self.anthropic_client.messages.create(**params)

        # Standardize response format
        return {
            'provider': 'anthropic',
            'model': model,
            'content': self._extract_anthropic_content(response),
            'usage': {
                'input_tokens': response.usage.input_tokens,
                'output_tokens': response.usage.output_tokens
            },
            'raw_response': response
        }

    def _generate_openai(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False
    ) -> Dict[str, Any]:
        """
        Generate using OpenAI GPT.

        Returns standardized response format.
        """
        params = {
            'model': model,
            'messages': messages,
            'temperature': temperature,
            'max_tokens': max_tokens
        }

        if json_mode:
            params['response_format'] = {'type': 'json_object'}

        # Call API
        response = self.openai_client.chat.completions.create(**params)

        # Standardize response format
        return {
            'provider': 'openai',
            'model': model,
            'content': response.choices[0].message.content or '',
            'usage': {
                'input_tokens': response.usage.prompt_tokens,
                'output_tokens': response.usage.completion_tokens
            },
            'raw_response': response
        }

    def _extract_anthropic_content(self, response) -> str:
        """
        Extract text content from Anthropic response.

        Anthropic can return multiple content blocks; we join the text ones.
        """
        text_parts = []
        for block in response.content:
            if block.type == 'text':
                text_parts.append(block.text)
        return '\n'.join(text_parts)

    def _try_fallback(
        self,
        messages: List[Dict[str, str]],
        failed_provider: str,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False
    ) -> Dict[str, Any]:
        """
        Try the other provider once when the primary fails.

        If Claude fails → try the OpenAI tier
        If GPT fails → try the Anthropic tier
        """
        print(f"Attempting fallback from {failed_provider}...")

        candidates = [self.simple_model_config, self.complex_model_config]
        fallback_config = next(
            (c for c in candidates if c['provider'] != failed_provider),
            None
        )
        if fallback_config is None:
            raise Exception(f"No fallback provider configured besides {failed_provider}")

        try:
            return self._dispatch(
                provider=fallback_config['provider'],
                model=fallback_config['model'],
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=json_mode
            )
        except Exception as e:
            raise Exception(f"Fallback also failed: {e}")
