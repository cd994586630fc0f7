from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pipehub.core.contracts import GenerateConfig
from pipehub.core.logger import get_logger
from pipehub.wiring.registry import register_generator

logger = get_logger(__name__)


@register_generator(name="json")
def generate_json(cfg: GenerateConfig, *, output: Optional[Path] = None) -> Dict[str, Any]:
    """
    Hand the plugin list to the build step as a JSON document.

    Writes ``{"pipe": [{"alias", "path", "module", "version"}, ...]}`` to
    ``output`` (parent directories are created) or to stdout when no output is
    given.
    """
    payload = json.dumps(cfg.to_dict(), indent=2, sort_keys=True)

    if output is None:
        sys.stdout.write(payload + "\n")
        written_to = "-"
    else:
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload + "\n", encoding="utf-8")
        written_to = str(output)

    logger.info(f"Generate config written: pipes={len(cfg.pipes)}, target={written_to}")
    return {
        "status": "success",
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "pipe_count": len(cfg.pipes),
        "written_to": written_to,
    }
