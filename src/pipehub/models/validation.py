from __future__ import annotations

from pipehub.core.exceptions import ValidationError
from pipehub.models.config import Config


def validate_config(cfg: Config) -> None:
    """Enforce block cardinality, raising on the first violation.

    Order: ``server`` count, then ``server.http``, then ``server.action``.
    ``host`` and ``pipe`` blocks are unrestricted.
    """
    if len(cfg.servers) > 1:
        raise ValidationError("server", len(cfg.servers))

    for server in cfg.servers:
        if len(server.http) > 1:
            raise ValidationError("server.http", len(server.http))
        if len(server.action) > 1:
            raise ValidationError("server.action", len(server.action))
