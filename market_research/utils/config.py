"""
Configuration Loading

Tunables live in config/config.yaml; secrets live in the environment
(loaded from .env). The merged result is a plain nested dict that every
component receives in its constructor.

Design:
- Built-in defaults mirror config/config.yaml, so a partial (or missing)
  YAML file is still a complete configuration
- A handful of environment variables override YAML for deployment tweaks
- Validation returns every problem at once instead of failing on the first
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from ..exceptions import ConfigurationError

# Load environment variables
load_dotenv()


DEFAULT_CONFIG_PATH = "./config/config.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    'llm': {
        'simple_model': {
            'provider': 'openai',
            'model': 'gpt-4o-mini',
            'temperature': 0.3,
            'max_tokens': 2048,
        },
        'complex_model': {
            'provider': 'anthropic',
            'model': 'claude-3-5-sonnet-20241022',
            'temperature': 0.3,
            'max_tokens': 2048,
        },
        'fallback_enabled': False,
        'min_request_interval_seconds': 4.0,
    },
    'api': {
        'request_timeout_seconds': 30,
        'max_retries': 3,
        'retry_delay_seconds': 1.0,
        'retry_backoff_multiplier': 2,
    },
    'web_search': {
        'preferred_provider': 'tavily',
        'serper_api_url': 'https://google.serper.dev/search',
        'search_depth': 'basic',
    },
    'agents': {
        'reddit': {
            'posts_per_query': 10,
            'min_queries': 3,
            'max_queries': 5,
            'enable_llm_relevance_filter': False,
            'recency_window': 'month',
            'communities': [],
            'user_agent': 'ProductManagerCopilot/1.0',
            'token_url': 'https://www.reddit.com/api/v1/access_token',
            'search_url': 'https://oauth.reddit.com/search',
        },
        'competitor': {
            'discovery_results': 15,
            'search_results': 10,
            'max_names_for_extraction': 10,
            'max_competitors': 5,
        },
        'industry_trends': {
            'search_results': 10,
            'min_queries': 3,
            'max_queries': 5,
            'max_trends': 5,
            'query_suffix': 'news trends 2024 2025',
        },
    },
}

LLM_KEY_ENV = {
    'anthropic': 'ANTHROPIC_API_KEY',
    'openai': 'OPENAI_API_KEY',
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _apply_env_overrides(config: Dict[str, Any]) -> None:
    """Apply the supported environment overrides in place."""
    timeout_ms = os.getenv('REQUEST_TIMEOUT_MS')
    if timeout_ms:
        config['api']['request_timeout_seconds'] = int(timeout_ms) / 1000

    max_retries = os.getenv('MAX_RETRIES')
    if max_retries:
        config['api']['max_retries'] = int(max_retries)

    provider = os.getenv('WEB_SEARCH_PROVIDER')
    if provider:
        config['web_search']['preferred_provider'] = provider.strip().lower()

    user_agent = os.getenv('REDDIT_USER_AGENT')
    if user_agent:
        config['agents']['reddit']['user_agent'] = user_agent

    relevance_filter = os.getenv('ENABLE_LLM_RELEVANCE_FILTER')
    if relevance_filter:
        config['agents']['reddit']['enable_llm_relevance_filter'] = _env_flag(relevance_filter)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML and the environment.

    Args:
        config_path: Path to config.yaml (default: $MARKET_RESEARCH_CONFIG
                     or ./config/config.yaml). A missing file is not an
                     error; the built-in defaults are used.

    Returns:
        Complete configuration dict

    Raises:
        ConfigurationError: If the file exists but is not a YAML mapping
    """
    path = Path(config_path or os.getenv('MARKET_RESEARCH_CONFIG', DEFAULT_CONFIG_PATH))

    file_config: Dict[str, Any] = {}
    if path.exists():
        with open(path, 'r') as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}")
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(f"{path} must contain a mapping at the top level")
        file_config = loaded or {}

    config = _deep_merge(DEFAULT_CONFIG, file_config)
    _apply_env_overrides(config)
    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Check that every credential the pipeline needs is present.

    Returns:
        Human-readable error messages (empty list when valid)
    """
    errors = []

    # LLM keys: the simple tier serves every analysis call; the complex
    # tier is only reached as the provider fallback
    llm_config = config['llm']
    providers = {llm_config['simple_model'].get('provider')}
    if llm_config.get('fallback_enabled'):
        providers.add(llm_config['complex_model'].get('provider'))
    for provider in sorted(p for p in providers if p):
        env_name = LLM_KEY_ENV.get(provider)
        if env_name is None:
            errors.append(f"Unknown LLM provider in config: {provider}")
        elif not os.getenv(env_name):
            errors.append(f"{env_name} is required but not set")

    if not os.getenv('REDDIT_CLIENT_ID') or not os.getenv('REDDIT_CLIENT_SECRET'):
        errors.append("REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET are required but not set")

    if not os.getenv('TAVILY_API_KEY') and not os.getenv('SERPER_API_KEY'):
        errors.append("Either TAVILY_API_KEY or SERPER_API_KEY is required but neither is set")

    for agent in ('reddit', 'industry_trends'):
        limits = config['agents'][agent]
        if limits['min_queries'] > limits['max_queries']:
            errors.append(
                f"agents.{agent}: min_queries ({limits['min_queries']}) "
                f"exceeds max_queries ({limits['max_queries']})"
            )

    return errors


def ensure_valid_config(config: Dict[str, Any]) -> None:
    """
    Raise ConfigurationError listing every problem, if any.

    Called before any client is constructed so a misconfigured run never
    touches the network.
    """
    errors = validate_config(config)
    if errors:
        raise ConfigurationError("Invalid configuration: " + "; ".join(errors))
