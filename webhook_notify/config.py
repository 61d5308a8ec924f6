"""Application configuration loaded from a TOML file and environment variables."""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = "data/config.toml"


class ServerSettings(BaseModel):
    """Listener and inbound authentication settings."""

    bind: str = "0.0.0.0"
    port: int = 11451
    # Global webhook secret; empty disables signature verification.
    secrets: str = ""
    # Query-string token; empty authorizes every request.
    token: str = ""
    # Seconds in-flight requests get to finish on shutdown.
    grace_period: int = 10


class TelegramSettings(BaseModel):
    """Telegram Bot API credentials and the global destination chats."""

    bot_token: str = ""
    api_server: str | None = None
    send_to: list[int] = Field(default_factory=list)


class RepositorySettings(BaseModel):
    """Per-repository routing entry, keyed by ``owner/name``."""

    full_name: str
    send_to: list[int] = Field(default_factory=list)
    branch_ignore: list[str] = Field(default_factory=list)
    secrets: str = ""


class Settings(BaseSettings):
    """Application settings.

    Values passed to the constructor win over environment variables
    (``WEBHOOK_NOTIFY_`` prefix, ``__`` for nested fields), which win over
    the TOML file named by ``toml_file`` in the model config.
    """

    model_config = SettingsConfigDict(
        env_prefix="WEBHOOK_NOTIFY_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    app_name: str = "github-webhook-notify"
    debug: bool = False
    log_level: str = "INFO"

    server: ServerSettings = Field(default_factory=ServerSettings)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    repository: list[RepositorySettings] = Field(default_factory=list)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, TomlConfigSettingsSource(settings_cls))


def load_settings(path: str | Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from the TOML file at *path*.

    Raises:
        FileNotFoundError: If *path* does not exist.
        pydantic.ValidationError: If the file does not match the schema.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    class _FileSettings(Settings):
        model_config = SettingsConfigDict(toml_file=path)

    return _FileSettings()
