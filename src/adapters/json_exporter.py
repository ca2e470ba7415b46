"""Exportación JSON de las respuestas.

Permite guardar el payload validado de cualquier comando (`--output`) para
inspeccionarlo o reutilizarlo en otros pipelines.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def export_payload_json(*, payload: BaseModel | Any, output_path: Path) -> Path:
    """Exporta un modelo (o valor JSON) a UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
