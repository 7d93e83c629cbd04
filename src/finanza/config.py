"""Configuration loading and validation for the finance tracker."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

import yaml

from finanza.constants import (
    DEFAULT_RECURRING_ITEMS,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    SALARY_CATEGORY,
    SALARY_KEYWORDS,
)
from finanza.models.transaction import RecurringItem
from finanza.models.window import RangeSelector
from finanza.utils.logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_LANGUAGES = ("es", "en")
SUPPORTED_CURRENCIES = ("€", "$", "£")


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


@dataclass
class AppConfig:
    """User-facing preferences.

    Attributes:
        language: Interface and assistant language ("es" or "en").
        currency: Currency symbol used for display.
        default_range: Range selector used when none is given.
        income_categories: Categories offered for income.
        expense_categories: Categories offered for expenses.
    """

    language: str = "es"
    currency: str = "€"
    default_range: RangeSelector = RangeSelector.THIS_MONTH
    income_categories: list[str] = field(default_factory=lambda: list(INCOME_CATEGORIES))
    expense_categories: list[str] = field(default_factory=lambda: list(EXPENSE_CATEGORIES))

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "AppConfig":
        """Create from dictionary."""
        language = str(data.get("language", "es"))
        if language not in SUPPORTED_LANGUAGES:
            raise ConfigError(f"Unsupported language '{language}', expected one of {SUPPORTED_LANGUAGES}")

        currency = str(data.get("currency", "€"))
        if currency not in SUPPORTED_CURRENCIES:
            raise ConfigError(f"Unsupported currency '{currency}', expected one of {SUPPORTED_CURRENCIES}")

        try:
            default_range = RangeSelector.from_value(str(data.get("default_range", "thisMonth")))
        except ValueError as e:
            raise ConfigError(str(e)) from e

        return cls(
            language=language,
            currency=currency,
            default_range=default_range,
            income_categories=list(data.get("income_categories", INCOME_CATEGORIES)),  # type: ignore[call-overload]
            expense_categories=list(data.get("expense_categories", EXPENSE_CATEGORIES)),  # type: ignore[call-overload]
        )


@dataclass
class PaycheckConfig:
    """How the "last paycheck" range recognizes salary income.

    Attributes:
        salary_category: Income category that always counts as salary.
        keywords: Description substrings that count as salary.
        fallback_days: Length of the previous window when only one
            paycheck is found.
    """

    salary_category: str = SALARY_CATEGORY
    keywords: list[str] = field(default_factory=lambda: list(SALARY_KEYWORDS))
    fallback_days: int = 30

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "PaycheckConfig":
        """Create from dictionary."""
        return cls(
            salary_category=str(data.get("salary_category", SALARY_CATEGORY)),
            keywords=[str(k) for k in data.get("keywords", SALARY_KEYWORDS)],  # type: ignore[attr-defined]
            fallback_days=int(data.get("fallback_days", 30)),  # type: ignore[call-overload]
        )


@dataclass
class CodecConfig:
    """Options for CSV import.

    Attributes:
        amount_locale: How "1,234" is read on import ("EU" or "US").
    """

    amount_locale: str = "EU"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "CodecConfig":
        """Create from dictionary."""
        locale = str(data.get("amount_locale", "EU")).upper()
        if locale not in ("EU", "US"):
            raise ConfigError(f"amount_locale must be 'EU' or 'US', got '{locale}'")
        return cls(amount_locale=locale)


@dataclass
class StorageConfig:
    """Location of the local transaction store."""

    path: Path = field(default_factory=lambda: Path("finanza_data.json"))

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "StorageConfig":
        """Create from dictionary."""
        return cls(path=Path(str(data.get("path", "finanza_data.json"))))


@dataclass
class AssistantConfig:
    """Configuration for the language-model assistant.

    Attributes:
        enabled: Whether assistant commands are available.
        api_key_env: Environment variable holding the API key.
        model: Model for quick analysis and chat.
        advice_model: Model for extended-thinking advice.
        max_tokens: Maximum tokens per answer.
        thinking_budget: Thinking tokens allowed for advice requests.
        requests_per_minute: Client-side rate limit.
    """

    enabled: bool = True
    api_key_env: str = "ANTHROPIC_API_KEY"
    model: str = "claude-sonnet-4-5-20250929"
    advice_model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 1024
    thinking_budget: int = 8000
    requests_per_minute: int = 20

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "AssistantConfig":
        """Create from dictionary."""
        defaults = cls()
        return cls(
            enabled=bool(data.get("enabled", True)),
            api_key_env=str(data.get("api_key_env", defaults.api_key_env)),
            model=str(data.get("model", defaults.model)),
            advice_model=str(data.get("advice_model", defaults.advice_model)),
            max_tokens=int(data.get("max_tokens", defaults.max_tokens)),  # type: ignore[call-overload]
            thinking_budget=int(data.get("thinking_budget", defaults.thinking_budget)),  # type: ignore[call-overload]
            requests_per_minute=int(data.get("requests_per_minute", defaults.requests_per_minute)),  # type: ignore[call-overload]
        )


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file.
    """

    level: str = "INFO"
    file: str = "finanza.log"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(data.get("file", "finanza.log")),
        )


@dataclass
class Config:
    """Main configuration container."""

    app: AppConfig = field(default_factory=AppConfig)
    paycheck: PaycheckConfig = field(default_factory=PaycheckConfig)
    codec: CodecConfig = field(default_factory=CodecConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    recurring_items: list[RecurringItem] = field(default_factory=lambda: list(DEFAULT_RECURRING_ITEMS))
    custom_start: Optional[date] = None
    custom_end: Optional[date] = None


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> dict[str, object]:
    """Return a mapping section, treating a missing or null section as empty."""
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value


def _parse_optional_date(value: object, name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise ConfigError(f"'{name}' must be a YYYY-MM-DD date, got '{value}'") from e


def config_from_dict(data: dict[str, object]) -> Config:
    """Build a Config from parsed settings data.

    Raises:
        ConfigError: If a section has the wrong shape or an invalid value.
    """
    config = Config(
        app=AppConfig.from_dict(_section(data, "app")),
        paycheck=PaycheckConfig.from_dict(_section(data, "paycheck")),
        codec=CodecConfig.from_dict(_section(data, "codec")),
        storage=StorageConfig.from_dict(_section(data, "storage")),
        assistant=AssistantConfig.from_dict(_section(data, "assistant")),
        logging=LoggingConfig.from_dict(_section(data, "logging")),
    )

    if data.get("recurring_items") is not None:
        items = data["recurring_items"]
        if not isinstance(items, list):
            raise ConfigError(f"'recurring_items' must be a list, got {type(items).__name__}")
        try:
            config.recurring_items = [RecurringItem.from_dict(item) for item in items]
        except (KeyError, ValueError, TypeError) as e:
            raise ConfigError(f"Invalid recurring item: {e}") from e

    custom = _section(data, "custom_range")
    config.custom_start = _parse_optional_date(custom.get("start"), "custom_range.start")
    config.custom_end = _parse_optional_date(custom.get("end"), "custom_range.end")

    return config


def load_config(settings_path: Optional[Path] = None, config_dir: Optional[Path] = None) -> Config:
    """Load configuration from settings.yaml.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object; defaults when the file is missing.

    Raises:
        ConfigError: If the settings file is invalid.
    """
    if config_dir is None:
        config_dir = Path("config")
    if settings_path is None:
        settings_path = config_dir / "settings.yaml"

    if not settings_path.exists():
        logger.warning(f"Settings file not found: {settings_path}, using defaults")
        return Config()

    config = config_from_dict(load_yaml_file(settings_path))
    logger.info(f"Loaded settings from {settings_path}")
    return config
