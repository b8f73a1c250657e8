import os
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

_CONFIG_PATH = os.getenv("AUTORESTART_CONFIG", "config.toml")
_ENV_PATH = os.getenv("AUTORESTART_ENV", ".env")


class RestartSettings(BaseModel):
    auto_restart_enabled: bool = True
    enable_manual_restart: bool = True
    flag: str = "@css/root"
    # HH:MM:SS, validated by the scheduler
    auto_restart_time: str = "01:00:00"
    command: str = "!restartserver"


class ServerSettings(BaseModel):
    log_path: Path = Field(default=Path("data/logs/latest.log"))
    rcon_command: list[str] = ["rcon-cli"]
    rcon_timeout: float = 10.0
    stop_command: str = "stop"


class LogParserSettings(BaseModel):
    join_pattern: str = r"^(?!.*<).* (\S+)\[/.*?\] logged in with entity"
    leave_pattern: str = r"^(?!.*<).* (\S+) lost connection: (.*)"
    chat_pattern: str = r": (\[Not Secure\] )?<(\S+)> (.*)"
    level_pattern: str = r"^(?!.*<).*Preparing level \"(.+)\""
    server_started_pattern: str = r"^(?!.*<).*Done \([0-9.]+s\)! For help"
    server_stop_pattern: str = r"^(?!.*<).*Stopping server"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AUTORESTART_",
        env_nested_delimiter="__",
        toml_file=_CONFIG_PATH,
        env_file=_ENV_PATH,
    )

    restart: RestartSettings = Field(default_factory=RestartSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    log_parser: LogParserSettings = Field(default_factory=LogParserSettings)

    # player name -> permission flags
    admins: dict[str, list[str]] = Field(default_factory=dict)
    # message key -> template, "{0}" is the number of seconds
    messages: dict[str, str] = Field(default_factory=dict)

    logs_dir: Path = Field(default=Path("logs"))

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Source order: init args > OS env > .env > config.toml > secrets
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


settings = Settings()
