"""
Cross-Chain Price Monitor - price comparison and arbitrage decision engine

Compares the price of an asset reported by two independent sources,
rejects stale or invalid readings, and flags spreads that remain
profitable after execution costs.
"""

__version__ = "1.0.0"
