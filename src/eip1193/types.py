from typing import Any, Literal, Union

from eth_typing import HexStr
from eth_utils import is_hex, to_hex
from pydantic import ConfigDict, Field, field_validator

from eip1193.utils.basemodel import BaseModel

ChainIdLike = Union[int, str]

ETH_SUBSCRIPTION = "eth_subscription"
"""The ``type`` of a ``message`` carrying a subscription notification."""


def to_chain_id(value: ChainIdLike) -> HexStr:
    """
    Normalize a chain identifier to its canonical hex-string form,
    e.g. ``1``, ``"0x1"`` and ``"0x01"`` all become ``"0x1"``.

    Args:
        value (Union[int, str]): An integer or a ``0x``-prefixed hex-string.

    Raises:
        ValueError: When the value is not a non-negative integer or hex-string.

    Returns:
        HexStr
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid chain ID '{value}'.")

    elif isinstance(value, int):
        if value < 0:
            raise ValueError(f"Chain ID must be non-negative, got '{value}'.")

        return to_hex(value)

    elif (
        isinstance(value, str)
        and value[:2].lower() == "0x"
        and len(value) > 2
        and is_hex(value)
    ):
        return to_hex(int(value, 16))

    raise ValueError(f"Invalid chain ID '{value}'. Expecting a '0x'-prefixed hex-string.")


def chain_id_to_int(value: ChainIdLike) -> int:
    """
    The integer value of a chain identifier.
    """
    return int(to_chain_id(value), 16)


class ProviderConnectInfo(BaseModel):
    """
    The payload of the ``connect`` event.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    chain_id: HexStr = Field(alias="chainId")
    """
    The chain connected to, as a hex-string.
    """

    @field_validator("chain_id", mode="before")
    @classmethod
    def validate_chain_id(cls, value):
        return to_chain_id(value)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, dict):
            return self.model_dump(by_alias=True) == other

        return super().__eq__(other)


class ProviderMessage(BaseModel):
    """
    The payload of the ``message`` event. The ``type`` is defined by the client.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    data: Any = None

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, dict):
            return self.model_dump() == other

        return super().__eq__(other)


class EthSubscriptionData(BaseModel):
    model_config = ConfigDict(frozen=True)

    subscription: str
    """
    The subscription ID, for correlating with the ``eth_subscribe`` result.
    """

    result: Any = None


class EthSubscriptionMessage(ProviderMessage):
    """
    A ``message`` carrying a notification for an ``eth_subscribe`` subscription.
    """

    type: Literal["eth_subscription"] = ETH_SUBSCRIPTION
    data: EthSubscriptionData

    @property
    def subscription(self) -> str:
        return self.data.subscription

    @property
    def result(self) -> Any:
        return self.data.result


__all__ = [
    "ChainIdLike",
    "EthSubscriptionData",
    "EthSubscriptionMessage",
    "ETH_SUBSCRIPTION",
    "ProviderConnectInfo",
    "ProviderMessage",
    "chain_id_to_int",
    "to_chain_id",
]
