"""
Plugin System
Base class for memory plugins and the registry that dispatches host events.
"""
from typing import List, Dict, Any, Optional, Tuple
from abc import ABC, abstractmethod
import inspect
import logging

from ..tools.base import BaseTool

logger = logging.getLogger(__name__)

# Host events the memory plugin listens to
EVENT_MESSAGE_RECEIVED = "message_received"
EVENT_BEFORE_AGENT_START = "before_agent_start"
EVENT_AGENT_END = "agent_end"


class BasePlugin(ABC):
    """
    Abstract base class for plugins.
    Plugins can provide Tools and event hooks.
    """
    @property
    @abstractmethod
    def name(self) -> str:
        """Unique plugin name"""
        pass

    @property
    def hooks(self) -> Dict[str, Any]:
        """Dictionary of event name to handler method"""
        return {}

    def get_tools(self) -> List[BaseTool]:
        """Return list of tools provided by this plugin"""
        return []

    async def on_load(self):
        """Called when plugin is loaded."""
        pass

    async def on_shutdown(self):
        """Called on shutdown"""
        pass


class PluginRegistry:
    """
    Registry for managing plugins and their event hooks.
    """
    def __init__(self):
        self._plugins: Dict[str, BasePlugin] = {}
        self._hooks: Dict[str, List[Any]] = {}
        self._plugin_hooks: Dict[str, List[Tuple[str, Any]]] = {}
        self._replaced: List[BasePlugin] = []
        self._loaded = False

    def register_hook(self, event: str, handler: Any):
        """Register a hook handler"""
        self._hooks.setdefault(event, []).append(handler)
        logger.debug(f"Registered hook for {event}")

    def unregister_hook(self, event: str, handler: Any):
        handlers = self._hooks.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def hook_count(self, event: str) -> int:
        return len(self._hooks.get(event, []))

    async def trigger_hook(self, hook: str, /, **kwargs) -> List[Any]:
        """
        Run all handlers for a hook in registration order.

        Keyword arguments (``event``, ``ctx``) are passed through to every
        handler. Returns the non-None handler results (e.g. context to prepend
        to a prompt). A failing handler is logged and skipped; it never breaks
        the dispatch to the remaining handlers.
        """
        results = []
        for handler in list(self._hooks.get(hook, [])):
            try:
                if inspect.iscoroutinefunction(handler):
                    result = await handler(**kwargs)
                else:
                    result = handler(**kwargs)
            except Exception as e:
                logger.error(f"Error in hook {hook}: {e}")
                continue
            if result is not None:
                results.append(result)
        return results

    def register_plugin(self, plugin: BasePlugin):
        """
        Register a plugin instance.

        A plugin registered under a name already in use replaces the old
        instance: its hooks are detached right away and it is shut down on
        the next ``initialize()``.
        """
        previous = self._plugins.get(plugin.name)
        if previous is not None and previous is not plugin:
            logger.warning(f"Plugin {plugin.name} already registered. Replacing.")
            self._detach_hooks(plugin.name)
            if getattr(previous, "_initialized", False):
                self._replaced.append(previous)
        self._plugins[plugin.name] = plugin
        logger.info(f"Registered plugin: {plugin.name}")

    def _detach_hooks(self, name: str):
        for event, handler in self._plugin_hooks.pop(name, []):
            self.unregister_hook(event, handler)

    async def _shutdown_plugin(self, name: str, plugin: BasePlugin):
        try:
            await plugin.on_shutdown()
        except Exception as e:
            logger.error(f"Failed to shut down plugin {name}: {e}")
        plugin._initialized = False

    async def _shutdown_replaced(self):
        while self._replaced:
            previous = self._replaced.pop(0)
            await self._shutdown_plugin(previous.name, previous)

    async def initialize(self):
        """Initialize all registered plugins"""
        await self._shutdown_replaced()

        for name, plugin in self._plugins.items():
            if getattr(plugin, "_initialized", False):
                continue

            try:
                await plugin.on_load()

                attached = list(plugin.hooks.items())
                for event, handler in attached:
                    self.register_hook(event, handler)
                self._plugin_hooks[name] = attached

                plugin._initialized = True
                logger.info(f"Initialized plugin: {name}")
            except Exception as e:
                logger.error(f"Failed to initialize plugin {name}: {e}", exc_info=True)

        self._loaded = True

    async def shutdown(self):
        """Shut down all initialized plugins"""
        await self._shutdown_replaced()
        for name, plugin in self._plugins.items():
            if getattr(plugin, "_initialized", False):
                await self._shutdown_plugin(name, plugin)
        self._hooks.clear()
        self._plugin_hooks.clear()
        self._loaded = False

    def get_all_tools(self) -> List[BaseTool]:
        """Aggregate tools from all plugins"""
        tools = []
        for plugin in self._plugins.values():
            tools.extend(plugin.get_tools())
        return tools

    def get_available_tool_names(self) -> List[str]:
        return [tool.name for tool in self.get_all_tools()]

    def get_tool(self, name: str) -> Optional[BaseTool]:
        return next((tool for tool in self.get_all_tools() if tool.name == name), None)

    def get_plugin(self, name: str) -> Optional[BasePlugin]:
        return self._plugins.get(name)


# Global Instance
plugin_registry = PluginRegistry()
