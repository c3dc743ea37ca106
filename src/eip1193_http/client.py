import asyncio
from concurrent.futures import ThreadPoolExecutor
from itertools import count
from typing import Any, Optional

import requests

from eip1193.api import ClientAPI, Params
from eip1193.config import ABNORMAL_CLOSURE, NORMAL_CLOSURE
from eip1193.exceptions import ClientError, ClientNotConnectedError
from eip1193.logging import logger, sanitize_url
from eip1193.types import to_chain_id
from eip1193.utils.rpc import USER_AGENT, RPCHeaders, request_with_retry
from eip1193_http.config import HTTPClientConfig

ACCOUNTS_METHODS = ("eth_accounts", "eth_requestAccounts")
"""Methods whose results are the authorized accounts."""


class HTTPClient(ClientAPI):
    """
    A client for a node's JSON-RPC HTTP API.

    Requests run on a thread-pool so they do not block the event loop.
    The client signals ``connect`` once ``eth_chainId`` succeeds,
    ``close`` when it loses the node, and the accounts whenever
    an accounts query returns.

    Args:
        uri (Optional[str]): The node URI. Overrides the configured one.
        config (Optional[:class:`~eip1193_http.config.HTTPClientConfig`]): Settings.
    """

    name = "http"

    def __init__(self, uri: Optional[str] = None, config: Optional[HTTPClientConfig] = None):
        super().__init__()
        config = config or HTTPClientConfig()
        if uri is not None:
            config = HTTPClientConfig.from_overrides({**config.model_dump(), "uri": uri})

        self.config = config
        self._session: Optional[requests.Session] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._request_ids = count(1)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} uri={sanitize_url(self.uri)}>"

    @property
    def uri(self) -> str:
        return self.config.uri

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    @property
    def headers(self) -> RPCHeaders:
        headers = RPCHeaders({"Content-Type": "application/json", "User-Agent": USER_AGENT})
        # Have to do it this way to avoid "multiple-keys" error.
        for key, value in self.config.request_headers.items():
            headers[key] = value

        return headers

    async def connect(self):
        """
        Open the HTTP session and query the chain, which signals ``connect``.
        """
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.headers)
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers, thread_name_prefix="eip1193-http"
            )

        logger.info(f"Connecting to '{sanitize_url(self.uri)}'.")
        try:
            # An invalid chain ID fails the connection.
            to_chain_id(await self.execute("eth_chainId"))
        except Exception as err:
            logger.warn_from_exception(err, f"Unable to connect to '{sanitize_url(self.uri)}'.")
            self._close_session()
            raise

    async def disconnect(self):
        if self._session is None:
            return

        self._close_session()
        self.signal_disconnect(NORMAL_CLOSURE, "Client disconnected.")

    async def execute(self, method: str, params: Optional[Params] = None) -> Any:
        if self._session is None or self._executor is None:
            raise ClientNotConnectedError()

        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(
                self._executor, self._make_request, method, params
            )
        except requests.ConnectionError as err:
            self._close_session()
            self.signal_disconnect(ABNORMAL_CLOSURE, f"Lost connection to the node: {err}")
            raise

        self._signal_result(method, result)
        return result

    def _make_request(self, method: str, params: Optional[Params]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": [] if params is None else params,
        }
        if self.config.retry_rate_limits:
            response = request_with_retry(
                lambda: self._post(payload), max_retries=self.config.max_retries
            )
        else:
            response = self._post(payload)

        data = response.json()
        if not isinstance(data, dict):
            raise ClientError(f"Unexpected response for '{method}'.", error={"result": data})

        elif "error" in data:
            error = data["error"]
            message = (
                error["message"] if isinstance(error, dict) and "message" in error else str(error)
            )
            raise ClientError(message, error=error if isinstance(error, dict) else None)

        return data.get("result")

    def _post(self, payload: dict) -> requests.Response:
        if self._session is None:
            raise requests.ConnectionError("Session closed.")

        response = self._session.post(self.uri, json=payload, timeout=self.config.request_timeout)
        response.raise_for_status()
        return response

    def _signal_result(self, method: str, result: Any):
        # The request succeeded, so a malformed result never fails it.
        try:
            if method == "eth_chainId" and isinstance(result, str):
                self.signal_connect(result)

            elif method in ACCOUNTS_METHODS and isinstance(result, list):
                self.signal_accounts(result)

        except (TypeError, ValueError) as err:
            logger.warn_from_exception(err, f"Unable to signal the result of '{method}'.")

    def _close_session(self):
        if self._session is not None:
            self._session.close()
            self._session = None

        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
