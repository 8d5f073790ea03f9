"""
Price source configuration models using Pydantic.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from feeds.base import BaseFeed


def asset_key(asset: str) -> str:
    """Assets are addressed case-insensitively"""
    return asset.lower()


class SourceConfig(BaseModel):
    """One price source for one asset, keyed by (source_id, asset)"""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    source_id: int = Field(..., ge=0)  # Chain id for on-chain feeds
    asset: str = Field(..., min_length=1)
    feed: BaseFeed
    max_staleness: int = Field(..., ge=0)  # Seconds
    is_active: bool = True

    @field_validator('asset')
    @classmethod
    def normalise_asset(cls, v: str) -> str:
        return asset_key(v)

    @property
    def key(self) -> tuple[int, str]:
        return (self.source_id, self.asset)

    def to_dict(self) -> dict:
        return {
            "source_id": self.source_id,
            "asset": self.asset,
            "feed": self.feed.name,
            "max_staleness": self.max_staleness,
            "is_active": self.is_active,
        }
