from pydantic import field_validator
from pydantic_settings import SettingsConfigDict

from eip1193.config import PluginConfig

DEFAULT_URI = "http://127.0.0.1:8545"


class HTTPClientConfig(PluginConfig):
    """
    Configure the HTTP JSON-RPC client.
    Values may also come from ``EIP1193_HTTP_``-prefixed environment variables.
    """

    uri: str = DEFAULT_URI
    """
    The node's HTTP URI.
    """

    request_timeout: float = 30
    """
    Seconds to wait for a response.
    """

    request_headers: dict[str, str] = {}
    """
    Extra headers to send with every request.
    """

    retry_rate_limits: bool = True
    """
    Back-off and retry requests rejected with HTTP 429.
    """

    max_retries: int = 3
    max_workers: int = 8

    model_config = SettingsConfigDict(extra="allow", env_prefix="EIP1193_HTTP_")

    @field_validator("uri")
    @classmethod
    def validate_uri(cls, value):
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Expecting an HTTP URI, got '{value}'.")

        return value

    @field_validator("max_retries", "max_workers")
    @classmethod
    def validate_positive(cls, value):
        if value < 1:
            raise ValueError("Must be at least 1.")

        return value
