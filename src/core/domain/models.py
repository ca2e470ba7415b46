"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación en el borde: el llamador comprueba que los campos requeridos de
  cada respuesta existen antes de usarlos.
- Los campos opcionales ausentes se toleran; la capa de presentación los
  sustituye por placeholders (`N/A`, `none`, `0`).

Nota:
- Estos modelos describen *qué* devuelve la API, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    model_validator,
)
from pydantic.config import ConfigDict


def _or_none(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


def _or_zero(value: Any, handler: ValidatorFunctionWrapHandler) -> int:
    try:
        return handler(value) or 0
    except ValidationError:
        return 0


def _as_text(value: Any) -> str | None:
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    return None


def _none_as_empty(value: Any) -> Any:
    return [] if value is None else value


# Campos que solo se muestran en pantalla: un valor nulo o de tipo inesperado
# se degrada a placeholder en vez de invalidar toda la respuesta.
DisplayText = Annotated[str | None, BeforeValidator(_as_text)]
DisplayDatetime = Annotated[datetime | None, WrapValidator(_or_none)]
DisplayCount = Annotated[int, WrapValidator(_or_zero)]
DisplayNumber = Annotated[float | int | None, WrapValidator(_or_none)]


class ApiRequest(BaseModel):
    """Descriptor de una llamada. Se construye por llamada y nunca se persiste."""

    model_config = ConfigDict(frozen=True)

    method: Literal["GET", "POST"] = Field(
        ...,
        description="Verbo HTTP soportado por los ejemplos.",
    )
    path: str = Field(
        ...,
        description="Ruta relativa a la base URL configurada.",
    )
    query: dict[str, str] | None = Field(
        default=None,
        description="Parámetros de query (string -> string), solo GET por convención.",
    )
    body: Any = Field(
        default=None,
        description="Valor JSON arbitrario; solo en POST.",
    )
    auth_token: str = Field(
        ...,
        description="Bearer token adjuntado en `Authorization`.",
    )

    @model_validator(mode="after")
    def _body_only_on_post(self) -> "ApiRequest":
        if self.body is not None and self.method != "POST":
            raise ValueError("a request body is only allowed on POST")
        return self


class ApiResponse(BaseModel):
    """Respuesta efímera: status y body siempre presentes, incluso en error.

    `parsed_body` solo se rellena en respuestas 2xx; el body de un error nunca
    se interpreta como payload de éxito.
    """

    status_code: int
    body_text: str
    parsed_body: Any = None
    parse_error: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


# --- Analytics ---


class Insight(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: DisplayText = None
    category: DisplayText = None
    priority: DisplayText = None
    description: DisplayText = None
    created_at: DisplayDatetime = None


class InsightsPage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    insights: list[Insight] = Field(
        ...,
        description="Lista de insights (requerida).",
    )
    unread_count: DisplayCount = Field(
        default=0,
        alias="unreadCount",
        description="Insights sin leer.",
    )


class TelemetryEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    event_type: DisplayText = None
    tool: DisplayText = None
    project_path: DisplayText = None
    time: DisplayDatetime = None


class EventStats(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    projects: DisplayCount = 0
    tools_used: DisplayCount = Field(default=0, alias="toolsUsed")
    total_tokens: DisplayCount = Field(default=0, alias="totalTokens")


class EventsPage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    total_count: DisplayCount = Field(default=0, alias="totalCount")
    events: Annotated[list[TelemetryEvent], BeforeValidator(_none_as_empty)] = Field(default_factory=list)
    stats: EventStats | None = None


class TrackedEvent(BaseModel):
    """Evento de analytics enviado por el cliente (single o batch)."""

    event_name: str = Field(..., min_length=1)
    event_data: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] | None = None
    timestamp: datetime | None = None


class TrackEventResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    event_id: DisplayText = None
    success: bool = False


class BatchTrackResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    processed: int
    failed: int
    success: bool


# --- Knowledge base ---


class Article(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: DisplayText = None
    topic: DisplayText = None
    tags: Annotated[list[DisplayText] | None, WrapValidator(_or_none)] = None
    updated_at: DisplayDatetime = None


class ArticleSearchResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    total: int
    articles: list[Article]


# --- Tutor API ---


class TelemetryRecord(BaseModel):
    """Evento de telemetría de una herramienta (payload de /telemetry/ingest)."""

    event_type: str = Field(..., min_length=1)
    tool: str = Field(..., min_length=1)
    project_path: str | None = None
    message_text: str | None = None
    data: dict[str, Any] | None = None


class IngestResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    events_processed: DisplayCount = 0
    user_id: DisplayText = None


class EventScore(BaseModel):
    model_config = ConfigDict(extra="ignore")

    event_id: DisplayText = None
    relevance: DisplayNumber = None


class GeneratedInsight(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: DisplayText = None
    provider: DisplayText = None
    description: DisplayText = None
    value: DisplayText = None
    recommendation: DisplayText = None
    event_scores: Annotated[list[EventScore], BeforeValidator(_none_as_empty)] = Field(default_factory=list)


class InsightGenerationResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    insight: GeneratedInsight | None = None


# --- OAuth ---


class UserInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | int
    email: str
    name: str
    login: str | None = None
    avatar_url: str | None = None


class TokenResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_in: int | None = None
    expires_at: datetime | None = None
    scope: str | None = None
