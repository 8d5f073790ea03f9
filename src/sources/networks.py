"""
Chainlink feed selection per network.

Testnets expose a single ETH/USD aggregator, so the same feed is used for
both sides there (prices are identical, which exercises the equal-price
path). Mainnet and local forks use the real Ethereum and Arbitrum feeds.
"""

import logging
from typing import Tuple

from config import CHAINLINK_FEEDS, RPC_TIMEOUT
from feeds.chainlink import ChainlinkFeed
from src.core.errors import ConfigurationMissing

logger = logging.getLogger(__name__)


def feeds_for_network(network: str) -> Tuple[str, str]:
    """Return (ethereum_feed, arbitrum_feed) aggregator addresses"""
    if network == "sepolia":
        return CHAINLINK_FEEDS["sepolia"], CHAINLINK_FEEDS["sepolia"]
    if network == "arbitrumSepolia":
        return CHAINLINK_FEEDS["arbitrumSepolia"], CHAINLINK_FEEDS["arbitrumSepolia"]
    if network in ("mainnet", "localhost", "hardhat"):
        return CHAINLINK_FEEDS["ethereum"], CHAINLINK_FEEDS["arbitrum"]
    raise ConfigurationMissing(f"unknown network {network!r}, no Chainlink feeds configured")


def create_rpc_feeds(
    network: str,
    eth_rpc_url: str,
    arb_rpc_url: str,
    timeout: float = RPC_TIMEOUT,
) -> Tuple[ChainlinkFeed, ChainlinkFeed]:
    ethereum_address, arbitrum_address = feeds_for_network(network)
    if ethereum_address == arbitrum_address:
        logger.info(f"Using the same feed for both sides on {network} (testnet mode)")
        # The testnet aggregator lives on one chain only
        rpc_url = arb_rpc_url if network == "arbitrumSepolia" else eth_rpc_url
        eth_rpc_url = arb_rpc_url = rpc_url
    if not eth_rpc_url or not arb_rpc_url:
        raise ConfigurationMissing("ETH_RPC_URL and ARB_RPC_URL must be set in rpc mode")

    return (
        ChainlinkFeed("Ethereum", eth_rpc_url, ethereum_address, timeout=timeout),
        ChainlinkFeed("Arbitrum", arb_rpc_url, arbitrum_address, timeout=timeout),
    )
