"""Server configuration.

Loads settings from ``PETSTORES_*`` environment variables with sensible defaults.
"""

from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WIDGET_PATH = Path(__file__).parent / "static" / "petbarn-widget.html"
WIDGET_URI = "ui://widget/petbarn.html"
WIDGET_MIME_TYPE = "text/html+skybridge"


class ServerConfig(BaseSettings):
    """Runtime settings shared by the stdio and HTTP servers."""

    server_name: str = Field(default="petstores-shop", description="MCP server name")
    widget_path: Path = Field(default=DEFAULT_WIDGET_PATH, description="Widget template file")
    host: str = Field(default="0.0.0.0", description="HTTP bind host")
    port: int = Field(
        default=8787,
        validation_alias=AliasChoices("PETSTORES_PORT", "PORT"),
        description="HTTP port",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    stateless_http: bool = Field(default=False, description="Run streamable HTTP without MCP sessions")

    model_config = SettingsConfigDict(
        env_prefix="PETSTORES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    def load_widget_html(self) -> str:
        """Read the widget template. Served unchanged."""
        return Path(self.widget_path).read_text(encoding="utf-8")
