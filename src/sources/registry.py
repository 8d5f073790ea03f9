"""
Source registry: the configuration store read by the engine.

Only the owner may register, toggle or remove sources. Each change swaps a
whole immutable SourceConfig under a lock, so readers never see a half
applied update.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple

from config import ARBITRUM_CHAIN_ID, DEFAULT_MAX_STALENESS, ETH_ADDRESS, ETHEREUM_CHAIN_ID
from feeds.base import BaseFeed
from src.core.errors import ConfigurationMissing, Unauthorized
from .models import SourceConfig, asset_key

logger = logging.getLogger(__name__)


class SourceRegistry:
    """In-memory SourceConfig store keyed by (source_id, asset)"""

    def __init__(self, owner: str):
        self.owner = owner
        self._sources: Dict[Tuple[int, str], SourceConfig] = {}
        self._lock = threading.Lock()

    def _require_owner(self, caller: str):
        if caller != self.owner:
            raise Unauthorized(f"caller {caller!r} is not the owner")

    def transfer_ownership(self, caller: str, new_owner: str):
        self._require_owner(caller)
        with self._lock:
            self.owner = new_owner
        logger.info(f"Ownership transferred to {new_owner!r}")

    def set_source(
        self,
        caller: str,
        source_id: int,
        asset: str,
        feed: BaseFeed,
        max_staleness: int = DEFAULT_MAX_STALENESS,
        is_active: bool = True,
    ) -> SourceConfig:
        """Register or replace the source for (source_id, asset)"""
        self._require_owner(caller)
        source = SourceConfig(
            source_id=source_id,
            asset=asset,
            feed=feed,
            max_staleness=max_staleness,
            is_active=is_active,
        )
        with self._lock:
            self._sources[source.key] = source
        logger.info(
            f"Source {source_id} for {source.asset} set to {feed.name} "
            f"(max staleness {max_staleness}s, active={is_active})"
        )
        return source

    def set_active(self, caller: str, source_id: int, asset: str, is_active: bool) -> SourceConfig:
        self._require_owner(caller)
        key = (source_id, asset_key(asset))
        with self._lock:
            current = self._sources.get(key)
            if current is None:
                raise ConfigurationMissing(
                    f"no source {source_id} registered for {key[1]}",
                    source_id=source_id,
                    asset=key[1],
                )
            updated = current.model_copy(update={"is_active": is_active})
            self._sources[key] = updated
        logger.info(f"Source {source_id} for {key[1]} active={is_active}")
        return updated

    def remove_source(self, caller: str, source_id: int, asset: str):
        self._require_owner(caller)
        key = (source_id, asset_key(asset))
        with self._lock:
            if self._sources.pop(key, None) is None:
                raise ConfigurationMissing(
                    f"no source {source_id} registered for {key[1]}",
                    source_id=source_id,
                    asset=key[1],
                )
        logger.info(f"Source {source_id} for {key[1]} removed")

    def initialize_oracles(
        self,
        caller: str,
        ethereum_feed: BaseFeed,
        arbitrum_feed: BaseFeed,
        asset: str = ETH_ADDRESS,
        max_staleness: int = DEFAULT_MAX_STALENESS,
    ) -> List[SourceConfig]:
        """Register the Ethereum and Arbitrum feeds for an asset, both active"""
        return [
            self.set_source(caller, ETHEREUM_CHAIN_ID, asset, ethereum_feed, max_staleness),
            self.set_source(caller, ARBITRUM_CHAIN_ID, asset, arbitrum_feed, max_staleness),
        ]

    def find(self, source_id: int, asset: str) -> Optional[SourceConfig]:
        return self._sources.get((source_id, asset_key(asset)))

    def get(self, source_id: int, asset: str) -> SourceConfig:
        source = self.find(source_id, asset)
        if source is None:
            raise ConfigurationMissing(
                f"no source {source_id} registered for {asset_key(asset)}",
                source_id=source_id,
                asset=asset_key(asset),
            )
        return source

    def sources(self) -> List[SourceConfig]:
        with self._lock:
            return list(self._sources.values())

    def get_state(self) -> dict:
        return {
            "owner": self.owner,
            "sources": [s.to_dict() for s in self.sources()],
        }
