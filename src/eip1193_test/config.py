from pydantic import NonNegativeInt, field_validator
from pydantic_settings import SettingsConfigDict

from eip1193.config import PluginConfig

DEFAULT_TEST_CHAIN_ID = 1337
DEFAULT_TEST_ACCOUNTS = [
    "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
]
"""The first accounts of the ``test test ... junk`` mnemonic."""


class LocalClientConfig(PluginConfig):
    chain_id: NonNegativeInt = DEFAULT_TEST_CHAIN_ID
    accounts: list[str] = DEFAULT_TEST_ACCOUNTS
    model_config = SettingsConfigDict(extra="allow", env_prefix="EIP1193_TEST_")

    @field_validator("accounts")
    @classmethod
    def validate_accounts(cls, value):
        if len(set(a.lower() for a in value)) != len(value):
            raise ValueError("Accounts must be unique.")

        return value
