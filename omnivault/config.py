"""
Configuration for OmniVault.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """Generative-AI provider configuration."""

    provider: str = "openai"  # openai, ollama
    model: str = "gpt-4o-mini"
    base_url: str | None = None
    api_key: str | None = None
    temperature: float = 0.2
    max_tokens: int = 2000
    timeout: float = 120.0
    # Capabilities beyond chat (OpenAI only)
    chat_model: str | None = None
    research_model: str = "gpt-4o"
    image_model: str = "dall-e-3"
    speech_model: str = "gpt-4o-mini-tts"
    voice: str = "alloy"


class StorageConfig(BaseModel):
    """Local key-value storage configuration."""

    backend: str = "sqlite"  # sqlite, memory
    db_path: str = "data/omnivault.db"
    key_prefix: str = "omnivault"


class VaultConfig(BaseModel):
    """Note lifecycle and similarity tuning."""

    placeholder_title: str = "Untitled Insight"
    enrichment_min_content_length: int = 20
    enable_enrichment: bool = True
    related_limit: int = 3
    tag_weight: float = 2.0
    title_word_weight: float = 1.5
    containment_weight: float = 1.0
    min_title_word_length: int = 3
    lookup_relevance: float = 0.95
    briefing_note_count: int = 3
    recent_limit: int = 4
    context_token_budget: int = 24000


class TokenizerConfig(BaseModel):
    """Token counting configuration."""

    provider: str = "tiktoken"  # tiktoken, approximate
    model: str = "cl100k_base"
    chars_per_token: float = 4.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    vault: VaultConfig = Field(default_factory=VaultConfig)
    tokenizer: TokenizerConfig = Field(default_factory=TokenizerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            OMNIVAULT_LLM_PROVIDER: LLM provider (openai, ollama)
            OMNIVAULT_LLM_MODEL: LLM model name
            OMNIVAULT_LLM_BASE_URL: LLM base URL
            OMNIVAULT_LLM_API_KEY: LLM API key (for OpenAI)
            OMNIVAULT_STORAGE_BACKEND: Key-value backend (sqlite, memory)
            OMNIVAULT_STORAGE_DB_PATH: SQLite database path
            OMNIVAULT_ENABLE_ENRICHMENT: Generate illustrations for saved notes
            OMNIVAULT_LOG_LEVEL: Log level
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            if value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        return cls(
            llm=LLMConfig(
                provider=get_env("OMNIVAULT_LLM_PROVIDER", "openai"),
                model=get_env("OMNIVAULT_LLM_MODEL", "gpt-4o-mini"),
                base_url=get_env("OMNIVAULT_LLM_BASE_URL"),
                api_key=get_env("OMNIVAULT_LLM_API_KEY"),
                temperature=get_env("OMNIVAULT_LLM_TEMPERATURE", 0.2),
                max_tokens=get_env("OMNIVAULT_LLM_MAX_TOKENS", 2000),
                timeout=get_env("OMNIVAULT_LLM_TIMEOUT", 120.0),
                chat_model=get_env("OMNIVAULT_LLM_CHAT_MODEL"),
                research_model=get_env("OMNIVAULT_LLM_RESEARCH_MODEL", "gpt-4o"),
                image_model=get_env("OMNIVAULT_LLM_IMAGE_MODEL", "dall-e-3"),
                speech_model=get_env("OMNIVAULT_LLM_SPEECH_MODEL", "gpt-4o-mini-tts"),
                voice=get_env("OMNIVAULT_LLM_VOICE", "alloy"),
            ),
            storage=StorageConfig(
                backend=get_env("OMNIVAULT_STORAGE_BACKEND", "sqlite"),
                db_path=get_env("OMNIVAULT_STORAGE_DB_PATH", "data/omnivault.db"),
                key_prefix=get_env("OMNIVAULT_STORAGE_KEY_PREFIX", "omnivault"),
            ),
            vault=VaultConfig(
                placeholder_title=get_env("OMNIVAULT_PLACEHOLDER_TITLE", "Untitled Insight"),
                enable_enrichment=get_env("OMNIVAULT_ENABLE_ENRICHMENT", True),
                context_token_budget=get_env("OMNIVAULT_CONTEXT_TOKEN_BUDGET", 24000),
            ),
            tokenizer=TokenizerConfig(
                provider=get_env("OMNIVAULT_TOKENIZER_PROVIDER", "tiktoken"),
                model=get_env("OMNIVAULT_TOKENIZER_MODEL", "cl100k_base"),
            ),
            logging=LoggingConfig(
                level=get_env("OMNIVAULT_LOG_LEVEL", "INFO"),
                log_to_file=get_env("OMNIVAULT_LOG_TO_FILE", True),
                log_dir=get_env("OMNIVAULT_LOG_DIR", "logs"),
                file_rotation=get_env("OMNIVAULT_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("OMNIVAULT_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("OMNIVAULT_LOG_COMPRESSION", "zip"),
                serialize=get_env("OMNIVAULT_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        final_dict = {**config_dict}

        # Only sections that differ from defaults count as env overrides
        default = cls()
        for section in ("llm", "storage", "vault", "tokenizer", "logging"):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        return cls(**final_dict) if final_dict else env_config
