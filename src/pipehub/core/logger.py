import logging
import sys
import contextvars
from typing import Optional

# Context variable to carry the configuration source (file path or "<dict>") being loaded
_CONFIG_SOURCE: contextvars.ContextVar[str] = contextvars.ContextVar("config_source", default="-")


class _ConfigSourceFilter(logging.Filter):
    """Logging filter that injects the config source from contextvars into the record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.config_source = _CONFIG_SOURCE.get()
        return True


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | cfg=%(config_source)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_root_logger(level: str = "INFO") -> None:
    """
    Configure root logger and pipehub-specific logger.

    Root logger stays at INFO to suppress library noise. Only the pipehub
    namespace is set to the requested level.

    Args:
        level: Log level for pipehub logs (DEBUG, INFO, WARNING, ERROR).

    Safe to call multiple times; it will not duplicate handlers (idempotent).
    """
    root = logging.getLogger()

    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and any(isinstance(f, _ConfigSourceFilter) for f in h.filters):
            # Already configured; just update pipehub logger level
            logging.getLogger("pipehub").setLevel(getattr(logging, level.upper(), logging.INFO))
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter())
    handler.addFilter(_ConfigSourceFilter())
    handler.setLevel(logging.DEBUG)
    root.addHandler(handler)
    root.setLevel(logging.INFO)

    logging.getLogger("pipehub").setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str = "pipehub") -> logging.Logger:
    """
    Get a module-specific logger. Handlers live on the root logger, configured
    by :func:`configure_root_logger`.
    """
    return logging.getLogger(name)


def push_config_source(source: Optional[str]) -> Optional[contextvars.Token]:
    """Set the config source in context and return a token for later reset."""
    if not source:
        return None
    return _CONFIG_SOURCE.set(source)


def reset_config_source(token: Optional[contextvars.Token]) -> None:
    """Reset the config source context using the provided token (if any)."""
    if token is None:
        return
    _CONFIG_SOURCE.reset(token)
