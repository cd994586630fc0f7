"""pipehub.

Configuration core for the pipehub server: decodes a block-structured
configuration document into a validated, typed model and projects it into the
shapes consumed by the plugin build step and the server runtime.
"""

from pipehub.loader import load_config
from pipehub.orchestrator import ServerOrchestrator
from pipehub.wiring.projections import to_client_config, to_generate_config, to_shutdown_context

__version__ = "0.1.0"

__all__ = [
    "ServerOrchestrator",
    "load_config",
    "to_client_config",
    "to_generate_config",
    "to_shutdown_context",
]
