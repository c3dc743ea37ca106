from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from eip1193.exceptions import ConfigError, is_error_code
from eip1193.logging import DEFAULT_LOG_LEVEL, LogLevel
from eip1193.utils.misc import load_config

ConfigType = TypeVar("ConfigType", bound="PluginConfig")

NORMAL_CLOSURE = 1000
"""The close code for a normal, intentional disconnect."""

ABNORMAL_CLOSURE = 1006
"""The close code for a connection lost without a close frame."""


class PluginConfig(BaseSettings):
    """
    A base configuration class. The provider and each client
    configure themselves with a subclass of this class.
    """

    model_config = SettingsConfigDict(extra="allow")

    @classmethod
    def from_overrides(cls: type[ConfigType], overrides: dict) -> ConfigType:
        """
        Create the config from its defaults, updated with the given overrides.

        Raises:
            :class:`~eip1193.exceptions.ConfigError`: When the result is invalid.
        """
        default_values = cls().model_dump()

        def update(root: dict, value_map: dict):
            for key, val in value_map.items():
                if isinstance(val, dict) and key in root and isinstance(root[key], dict):
                    root[key] = update(root[key], val)
                else:
                    root[key] = val

            return root

        data = update(default_values, overrides)
        try:
            return cls.model_validate(data)
        except ValidationError as err:
            raise ConfigError(str(err)) from err

    @classmethod
    def from_file(
        cls: type[ConfigType], path: Union[Path, str], section: Optional[str] = None
    ) -> ConfigType:
        """
        Load the config from a ``.yaml`` or ``.json`` file.

        Args:
            path (Union[Path, str]): The path to the config file.
            section (Optional[str]): Only use this top-level key of the file.

        Raises:
            :class:`~eip1193.exceptions.ConfigError`: When the file is missing,
              unparseable, or invalid.
        """
        path = Path(path)
        try:
            data = load_config(path, must_exist=True)
        except (OSError, TypeError, yaml.YAMLError, ValueError) as err:
            raise ConfigError(f"Unable to load config file '{path}': {err}") from err

        if section is not None:
            data = data.get(section) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"Config file '{path}' must contain a mapping.")

        return cls.from_overrides(data)

    def __getitem__(self, item: str) -> Any:
        extra = self.__pydantic_extra__ or {}
        if item in self.__dict__:
            return self.__dict__[item]

        elif item in extra:
            return extra[item]

        raise KeyError(f"'{item}' not in config.")

    def __contains__(self, key: str) -> bool:
        return key in self.__dict__ or key in (self.__pydantic_extra__ or {})

    def __str__(self) -> str:
        data = self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude_unset=True,
            exclude_defaults=True,
        )
        return yaml.safe_dump(data)


class ProviderConfig(PluginConfig):
    """
    Configure the provider's request policy.
    Values may also come from ``EIP1193_``-prefixed environment variables.
    """

    authorize_accounts: bool = True
    """
    Reject account-bearing requests (signing, sending transactions)
    naming an account the client has not reported as authorized.
    """

    unsupported_methods: list[str] = []
    """
    Methods the provider rejects as unsupported without asking the client.
    """

    default_close_code: int = NORMAL_CLOSURE
    """
    The ``close`` code used when a client signals a disconnect without one.
    """

    log_level: str = DEFAULT_LOG_LEVEL

    model_config = SettingsConfigDict(extra="allow", env_prefix="EIP1193_")

    @field_validator("default_close_code")
    @classmethod
    def validate_close_code(cls, value):
        if not is_error_code(value):
            raise ValueError("Close code must be an integer.")

        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value):
        if isinstance(value, LogLevel):
            return value.name

        name = str(value).upper()
        if name not in LogLevel.__members__:
            raise ValueError(f"Unknown log level '{value}'.")

        return name
