"""
Startup Module
Loads configuration, configures logging and initializes the memory plugin.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .logging import configure_logging
from .plugins import PluginRegistry, plugin_registry
from ..config import PLUGIN_ID, Config, ConfigError, load_config

logger = logging.getLogger(__name__)


async def initialize_plugins(
    config: Optional[Config] = None,
    registry: Optional[PluginRegistry] = None,
    config_path: Optional[Union[str, Path]] = None,
    setup_logging: bool = True,
) -> PluginRegistry:
    """
    Register and initialize the memory plugin.

    An invalid or missing configuration disables the plugin with a warning
    instead of failing the host's startup.

    Args:
        config: Already-loaded configuration. Loaded from config.yaml if omitted.
        registry: Target registry. Defaults to the global plugin_registry.
        config_path: Alternative config.yaml location.
        setup_logging: Configure file/console logging from the config.
    """
    from ..plugins.memory import LightragMemoryPlugin

    registry = registry or plugin_registry

    if config is None:
        try:
            config = load_config(config_path)
        except (FileNotFoundError, ConfigError, ValidationError) as e:
            logger.warning(f"{PLUGIN_ID}: invalid config; plugin disabled: {e}")
            return registry

    if setup_logging:
        configure_logging(
            log_dir=config.logging.log_dir,
            log_level="DEBUG" if config.memory.debug else config.logging.level,
            max_days=config.logging.max_days,
            json_format=config.logging.json_format,
            console_colors=config.logging.console_colors,
        )

    registry.register_plugin(LightragMemoryPlugin(config.memory))
    await registry.initialize()
    logger.info(f"Plugin initialized: {PLUGIN_ID}")
    return registry
