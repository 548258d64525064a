"""Core configuration.

- Centralizes environment variables (pydantic-settings) away from the CLI.
- Holds the vendor endpoint templates shared by every adapter.
- `Session` is the immutable view of the configuration that the controller
  hands to every collaborator it creates.
"""

from __future__ import annotations

import ipaddress
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

SMARTHOME_SKILL_ID = "amzn1.ask.1p.smarthome"  # cSpell:disable-line

# Mobile bridge signature; the vendor API rejects requests without it.
DEFAULT_USER_AGENT = (
    "PitanguiBridge/2.2.479076.0-[PLATFORM=Android][MANUFACTURER=]"
    "[RELEASE=10][BRAND=][SDK=29][MODEL=]"
)

API_PATH: dict[str, str] = {
    "BEHAVIORS_ENTITIES": "https://alexa.{AMAZON_DOMAIN}/api/behaviors/entities?skillId={SKILL_ID}",
    "PHOENIX": "https://alexa.{AMAZON_DOMAIN}/api/phoenix?includeRelationships=true",
    "PHOENIX_STATE": "https://alexa.{AMAZON_DOMAIN}/api/phoenix/state",
}

_FALSY_FLAGS = {"", "0", "false", "no", "off"}

DEFAULT_ENV_FILE = Path(".env")


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            data[key] = value.strip().strip('"').strip("'")
    return data


def write_env_vars(values: dict[str, str | None], env_path: Path = DEFAULT_ENV_FILE) -> Path:
    """Create or update `ALEXA_SMARTPLUG_*` entries in a `.env` file."""

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# alexa-smartplug config (.env)"]
    for key in sorted(existing):
        value = existing[key]
        # Cookies carry spaces and semicolons.
        if any(ch in value for ch in " ;#"):
            value = f"'{value}'"
        lines.append(f"{key}={value}")
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class TargetIdentifier(str, Enum):
    """Which identifier a state envelope puts in its `entityId` field."""

    ENTITY = "entity"
    APPLIANCE = "appliance"


class AppSettings(BaseSettings):
    """Application settings read from `ALEXA_SMARTPLUG_*` variables (and `.env`)."""

    model_config = SettingsConfigDict(
        env_prefix="ALEXA_SMARTPLUG_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    cookie: SecretStr | None = Field(
        default=None,
        description="Session cookie of a logged-in Alexa web session.",
    )
    amazon_domain: str | None = Field(
        default=None,
        description="Amazon region domain of the account (e.g. 'amazon.co.jp').",
    )
    enable_log: bool = Field(
        default=False,
        description="Dump every request/response payload to the diagnostic log.",
    )
    alexa_ip: str | None = Field(
        default=None,
        description="Force DNS resolution of alexa.<domain> to this IP address.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent sent with every request.",
    )
    set_state_target: TargetIdentifier = Field(
        default=TargetIdentifier.ENTITY,
        description="Identifier used by control (write) requests.",
    )
    get_state_target: TargetIdentifier = Field(
        default=TargetIdentifier.APPLIANCE,
        description="Identifier used by state (read) requests.",
    )

    @field_validator("enable_log", mode="before")
    @classmethod
    def _presence_flag(cls, value: object) -> object:
        # Setting the variable at all turns logging on, unless it is an explicit "off".
        if isinstance(value, str):
            return value.strip().lower() not in _FALSY_FLAGS
        return value

    @field_validator("cookie", "amazon_domain", "alexa_ip", mode="before")
    @classmethod
    def _blank_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("alexa_ip")
    @classmethod
    def _valid_ip(cls, value: str | None) -> str | None:
        if value is not None:
            ipaddress.ip_address(value)
        return value


class Session(BaseModel):
    """Immutable credentials and endpoints of one Alexa account."""

    model_config = ConfigDict(frozen=True)

    cookie: SecretStr
    amazon_domain: str = Field(..., min_length=1)
    skill_id: str = SMARTHOME_SKILL_ID
    api_path: dict[str, str] = Field(default_factory=lambda: dict(API_PATH))

    @property
    def alexa_host(self) -> str:
        return f"alexa.{self.amazon_domain}"

    def url(self, name: str) -> str:
        """Expand one of the `API_PATH` templates for this account."""

        return (
            self.api_path[name]
            .replace("{AMAZON_DOMAIN}", self.amazon_domain)
            .replace("{SKILL_ID}", self.skill_id)
        )
