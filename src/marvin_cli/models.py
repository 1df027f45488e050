"""Canonical Pydantic models shared across all marvin_cli modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Option models** -- the effective configuration of one invocation:
    :class:`Target`, :class:`OutputFormat`, and :class:`OptionConfig`.

**Request-resolution models** -- produced by the pure decision functions and
consumed by the command layer:
    :class:`Capability`, :class:`Action`, :class:`ContentType`, and
    :class:`RoutingDecision`.

Every model here is frozen. An :class:`OptionConfig` is assembled once by
:func:`~marvin_cli.config.resolve_options` and then passed explicitly to
whatever needs it; nothing mutates it afterwards.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# --- Options ---

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class Target(str, enum.Enum):
    """Which API host(s) a command may talk to.

    ``AUTO`` tries the desktop app first and falls back to the public host
    when the desktop app cannot be reached.
    """

    AUTO = "auto"
    DESKTOP = "desktop"
    PUBLIC = "public"


class OutputFormat(str, enum.Enum):
    """Formats the data written to stdout can be rendered in."""

    JSON = "json"
    CSV = "csv"
    TEXT = "text"


class OptionConfig(BaseModel):
    """The resolved, immutable options for one ``marvin`` invocation.

    Field names are snake_case; the camelCase aliases are the keys used in
    the persisted config file (``apiToken``, ``outputFormat``, ...). Both
    spellings are accepted on input.

    See Also:
        :func:`~marvin_cli.config.resolve_options`: Layers defaults,
        persisted config and CLI flags into an instance of this model.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    api_token: str = Field(default="", description="Standard API token")
    full_access_token: str = Field(
        default="", description="Elevated token for full-access endpoints"
    )
    target: Target = Field(default=Target.AUTO, description="auto, desktop or public")
    output_format: OutputFormat = Field(
        default=OutputFormat.JSON, description="Output format: json, csv, text"
    )
    quiet: bool = Field(default=False, description="Suppress non-essential output")
    verbose: bool = Field(default=False, description="Show debug diagnostics")
    desktop_url: str = Field(
        default="http://localhost:12082",
        description="Base URL of the desktop app's local API server",
    )
    public_url: str = Field(
        default="https://serv.amazingmarvin.com",
        description="Base URL of the public cloud API",
    )
    timeout: float = Field(
        default=5.0, gt=0, description="Per-attempt request timeout in seconds"
    )

    @field_validator("desktop_url", "public_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError:
            raise ValueError(f"{value!r} is not an http(s) URL with a host") from None
        return value


# --- Request resolution ---


class Capability(BaseModel):
    """What an API operation needs from the endpoint and the credentials.

    ``desktop_only`` pins the operation to the desktop app regardless of
    :attr:`OptionConfig.target`. ``requires_full_access`` switches the
    credential header to the full-access token; it never affects which
    hosts are tried.
    """

    model_config = ConfigDict(frozen=True)

    desktop_only: bool = False
    requires_full_access: bool = False


STANDARD = Capability()
FULL_ACCESS = Capability(requires_full_access=True)
DESKTOP_ONLY = Capability(desktop_only=True)


class Action(str, enum.Enum):
    """What the ``add`` command should do with its input."""

    CREATE_TASK = "create_task"
    CREATE_PROJECT = "create_project"
    ERROR = "error"
    SHOW_HELP = "show_help"


class ContentType(str, enum.Enum):
    """Wire content types accepted by the create endpoints."""

    TEXT = "text/plain"
    JSON = "application/json"


class RoutingDecision(BaseModel):
    """Output of :func:`~marvin_cli.classifier.decide`.

    Create actions carry ``endpoint_path``, ``body`` and ``content_type``;
    ``ERROR`` carries only ``error_message``; ``SHOW_HELP`` carries nothing.
    """

    model_config = ConfigDict(frozen=True)

    action: Action
    endpoint_path: Optional[str] = None
    body: Optional[str] = None
    content_type: Optional[ContentType] = None
    error_message: Optional[str] = None

    @model_validator(mode="after")
    def _check_populated_fields(self) -> RoutingDecision:
        request = (self.endpoint_path, self.body, self.content_type)
        if self.action in (Action.CREATE_TASK, Action.CREATE_PROJECT):
            if any(v is None for v in request) or self.error_message is not None:
                raise ValueError("create decisions need endpoint, body and content type only")
        elif self.action == Action.ERROR:
            if not self.error_message or any(v is not None for v in request):
                raise ValueError("error decisions carry only an error message")
        elif self.error_message is not None or any(v is not None for v in request):
            raise ValueError("help decisions carry no payload")
        return self

    @classmethod
    def create(
        cls, action: Action, endpoint_path: str, body: str, content_type: ContentType
    ) -> RoutingDecision:
        """Build a create-task or create-project decision."""
        return cls(
            action=action,
            endpoint_path=endpoint_path,
            body=body,
            content_type=content_type,
        )

    @classmethod
    def error(cls, message: str) -> RoutingDecision:
        """Build an error decision."""
        return cls(action=Action.ERROR, error_message=message)
