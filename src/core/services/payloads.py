"""Validación de payloads del lado del llamador.

Convierte un `ValidationError` de pydantic en `ResponseShapeError` indicando
qué campo requerido falta o no encaja.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from core.domain.errors import ResponseShapeError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(model: type[ModelT], payload: Any, resource: str) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(p) for p in first["loc"]) or "<root>"
        raise ResponseShapeError(resource, f"{location}: {first['msg']}") from exc
