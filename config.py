"""Configuration for the cross-chain price monitor"""
import os

# ============================================================
# OPERATION MODE
# ============================================================
# Options:
# - "rpc": Read Chainlink aggregators over JSON-RPC (needs ETH_RPC_URL / ARB_RPC_URL)
# - "simulation": Generate mock readings (for testing when network is blocked)
MODE = os.getenv("PRICE_MONITOR_MODE", "simulation")

# Network name used to pick Chainlink feeds in "rpc" mode
NETWORK = os.getenv("PRICE_MONITOR_NETWORK", "mainnet")

# JSON-RPC endpoints for the two sides
ETH_RPC_URL = os.getenv("ETH_RPC_URL", "")
ARB_RPC_URL = os.getenv("ARB_RPC_URL", "")
RPC_TIMEOUT = float(os.getenv("RPC_TIMEOUT", "10"))

# Account allowed to change sources and thresholds
OWNER = os.getenv("PRICE_MONITOR_OWNER", "owner")

# ============================================================
# ASSET & SOURCES
# ============================================================
# Native ETH placeholder address
ETH_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

ETHEREUM_CHAIN_ID = 1
ARBITRUM_CHAIN_ID = 42161

# Source A is always Ethereum, source B is always Arbitrum
SOURCE_A = ETHEREUM_CHAIN_ID
SOURCE_B = ARBITRUM_CHAIN_ID

# Chainlink ETH/USD aggregators
CHAINLINK_FEEDS = {
    "ethereum": "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419",
    "sepolia": "0x694AA1769357215DE4FAC081bf1f309aDC325306",
    "arbitrum": "0x639Fe6ab55C921f74e7fac1ee960C0B6293ba612",
    "arbitrumSepolia": "0xd30e2101a97dcbAeBCBC04F14C3f624E67A35165",
}

# ============================================================
# FIXED POINT
# ============================================================
CANONICAL_DECIMALS = 18
BASIS_POINTS = 10_000
MAX_UINT256 = 2**256 - 1

# ============================================================
# THRESHOLDS
# ============================================================
# Readings older than this (seconds) are rejected
DEFAULT_MAX_STALENESS = int(os.getenv("MAX_STALENESS", "3600"))

# Minimum spread to flag as opportunity (50 = 0.5%)
DEFAULT_MIN_PROFIT_BASIS_POINTS = int(os.getenv("MIN_PROFIT_BASIS_POINTS", "50"))

# Execution cost = gas price * gas units, both in wei terms
DEFAULT_GAS_PRICE = 20 * 10**9  # 20 gwei
DEFAULT_GAS_ESTIMATE = 300_000

# History of detected opportunities kept by the engine
HISTORY_SIZE = 100

# ============================================================
# RUNNER
# ============================================================
POLL_INTERVAL = float(os.getenv("POLL_INTERVAL", "15"))  # seconds

# Web server settings
WEB_HOST = "0.0.0.0"
WEB_PORT = int(os.getenv("WEB_PORT", "8000"))
