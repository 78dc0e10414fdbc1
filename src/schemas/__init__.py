from .endpoint import EndpointConfig
from .snapshot import CHANNEL_FIELDS, Indicator, Snapshot

__all__ = ["CHANNEL_FIELDS", "EndpointConfig", "Indicator", "Snapshot"]
