"""Chainlink aggregator feed read over JSON-RPC"""
import itertools
import logging
from typing import Optional

import httpx

from .base import BaseFeed, FeedError, RawReading

logger = logging.getLogger(__name__)


class ChainlinkFeed(BaseFeed):
    """Reads `latestRoundData()` from an AggregatorV3 contract via eth_call."""

    _DECIMALS_SIG = "0x313ce567"
    _LATEST_ROUND_DATA_SIG = "0xfeaf968c"

    def __init__(
        self,
        name: str,
        rpc_url: str,
        feed_address: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(name)
        self.rpc_url = rpc_url
        self.feed_address = feed_address
        self._client = client or httpx.Client(timeout=timeout)
        self._decimals: Optional[int] = None
        self._ids = itertools.count(1)

    def get_latest(self) -> RawReading:
        decimals = self._get_decimals()
        result = self._eth_call(self._LATEST_ROUND_DATA_SIG)
        words = self._split_words(result, expected=5)

        # (roundId, answer, startedAt, updatedAt, answeredInRound)
        answer = self._to_signed(words[1])
        updated_at = words[3]
        logger.debug(f"[{self.name}] answer={answer} decimals={decimals} updatedAt={updated_at}")
        return RawReading(price=answer, decimals=decimals, updated_at=updated_at)

    def close(self):
        self._client.close()

    def _get_decimals(self) -> int:
        if self._decimals is None:
            result = self._eth_call(self._DECIMALS_SIG)
            self._decimals = self._split_words(result, expected=1)[0]
        return self._decimals

    def _eth_call(self, data: str) -> str:
        payload = {
            "jsonrpc": "2.0",
            "method": "eth_call",
            "params": [{"to": self.feed_address, "data": data}, "latest"],
            "id": next(self._ids),
        }
        try:
            response = self._client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise FeedError(self.name, f"RPC request failed: {e}") from e

        if "error" in body:
            raise FeedError(self.name, f"RPC error: {body['error']}")
        result = body.get("result")
        if not result or result == "0x":
            raise FeedError(self.name, "empty eth_call result")
        return result

    def _split_words(self, result: str, expected: int) -> list[int]:
        data = result[2:] if result.startswith("0x") else result
        if len(data) < expected * 64:
            raise FeedError(self.name, f"short eth_call result ({len(data)} hex chars)")
        return [int(data[i * 64:(i + 1) * 64], 16) for i in range(expected)]

    @staticmethod
    def _to_signed(word: int) -> int:
        if word >= 2**255:
            return word - 2**256
        return word
