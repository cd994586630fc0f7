from __future__ import annotations

import importlib
import sys
from typing import Iterable

from pipehub.core.logger import get_logger

logger = get_logger(__name__)

BUILTIN_PLUGIN_MODULES: tuple[str, ...] = (
    # Generators
    "pipehub.generators.json_generator",
)


_LOADED = False


def load_builtin_plugins(*, reload: bool = False, modules: Iterable[str] = BUILTIN_PLUGIN_MODULES) -> None:
    """Import built-in generator/runtime modules so decorators register them.

    In production, call with reload=False (default) so imports are cheap.
    In tests, call with reload=True to clear the registries and re-run decorators.
    """

    global _LOADED

    if _LOADED and not reload:
        return

    if reload:
        from pipehub.wiring.registry import GeneratorRegistry, RuntimeRegistry

        GeneratorRegistry.clear()
        RuntimeRegistry.clear()

    for module_name in modules:
        if reload:
            sys.modules.pop(module_name, None)
        importlib.import_module(module_name)

    _LOADED = True


def load_plugin_modules(modules: Iterable[str]) -> None:
    """Import user plugin modules (e.g. ``mycompany.pipehub_runtime``) for their registrations."""
    for module_name in modules:
        logger.info(f"Loading plugin module: {module_name}")
        importlib.import_module(module_name)
