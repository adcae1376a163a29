"""
Memory Plugin Configuration
Loads plugin settings from config.yaml and the adapter API key from .env
"""
import math
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel


PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config.yaml"
load_dotenv(PROJECT_ROOT / ".env")

PLUGIN_ID = "memory-lightrag-local"

ALLOWED_MEMORY_KEYS = [
    "base_url",
    "api_key",
    "auto_ingest",
    "auto_recall",
    "max_recall_results",
    "capture_mode",
    "min_capture_length",
    "debug",
]

DEFAULT_MAX_RECALL_RESULTS = 8
MAX_RECALL_RESULTS_LIMIT = 20
DEFAULT_MIN_CAPTURE_LENGTH = 10


class ConfigError(ValueError):
    """Invalid or incomplete plugin configuration"""


class MemoryConfig(BaseModel):
    """LightRAG adapter and capture/recall settings"""
    base_url: str
    api_key: str
    auto_ingest: bool = True
    auto_recall: bool = True
    max_recall_results: int = DEFAULT_MAX_RECALL_RESULTS
    capture_mode: Literal["all", "everything"] = "all"
    min_capture_length: int = DEFAULT_MIN_CAPTURE_LENGTH
    debug: bool = False


class LoggingConfig(BaseModel):
    """Logging Configuration"""
    level: str = "INFO"
    log_dir: str = "./logs"
    json_format: bool = True
    max_days: int = 15
    console_colors: bool = True


class Config(BaseModel):
    """Main Configuration - loaded from config.yaml"""
    memory: MemoryConfig
    logging: LoggingConfig = LoggingConfig()


def load_yaml_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load configuration from config.yaml"""
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            "Copy config.example.yaml to config.yaml and set the adapter base_url."
        )

    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def _bounded_int(value: Any, default: int, minimum: int, maximum: Optional[int] = None) -> int:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    result = max(minimum, math.floor(number))
    if maximum is not None:
        result = min(maximum, result)
    return result


def create_memory_config(raw: Any) -> MemoryConfig:
    """
    Normalize the ``memory`` section into a MemoryConfig.

    Raises:
        ConfigError: on unknown keys or a missing base URL / API key.
    """
    data = raw if isinstance(raw, dict) else {}

    unknown = [k for k in data if k not in ALLOWED_MEMORY_KEYS]
    if unknown:
        raise ConfigError(f"{PLUGIN_ID} config has unknown keys: {', '.join(unknown)}")

    base_url = data.get("base_url") or os.getenv("LIGHTRAG_BASE_URL") or ""
    api_key = data.get("api_key") or os.getenv("LIGHTRAG_API_KEY") or ""
    base_url = base_url.strip().rstrip("/") if isinstance(base_url, str) else ""
    api_key = api_key.strip() if isinstance(api_key, str) else ""

    if not base_url or not api_key:
        raise ConfigError(f"{PLUGIN_ID}: base_url and api_key are required")

    return MemoryConfig(
        base_url=base_url,
        api_key=api_key,
        auto_ingest=data.get("auto_ingest") is not False,
        auto_recall=data.get("auto_recall") is not False,
        max_recall_results=_bounded_int(
            data.get("max_recall_results"), DEFAULT_MAX_RECALL_RESULTS, 1, MAX_RECALL_RESULTS_LIMIT
        ),
        capture_mode="everything" if data.get("capture_mode") == "everything" else "all",
        min_capture_length=_bounded_int(data.get("min_capture_length"), DEFAULT_MIN_CAPTURE_LENGTH, 1),
        debug=data.get("debug") is True,
    )


def create_config_from_yaml(yaml_data: Dict[str, Any]) -> Config:
    """Create Config object from YAML data"""
    memory_config = create_memory_config(yaml_data.get("memory", {}))

    logging_data = yaml_data.get("logging") or {}
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        log_dir=logging_data.get("log_dir", "./logs"),
        json_format=logging_data.get("json_format", True),
        max_days=logging_data.get("max_days", 15),
        console_colors=logging_data.get("console_colors", True),
    )

    return Config(memory=memory_config, logging=logging_config)


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Load and validate configuration from config.yaml"""
    return create_config_from_yaml(load_yaml_config(path))
