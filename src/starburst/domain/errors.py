# starburst/domain/errors.py
from dataclasses import dataclass
from typing import Literal


class StarburstError(Exception):
    """Base class for planner failures surfaced to callers."""


class InvalidTarget(StarburstError, LookupError):
    def __init__(self, guid: str):
        super().__init__(f"target node {guid!r} not found in node collection")
        self.guid = guid


class DatasetError(StarburstError, ValueError):
    pass


# Not raised: the edge still blocks, only the missing endpoint's bookkeeping is skipped
@dataclass(frozen=True)
class MalformedEdgeReference:
    edge_guid: str
    node_guid: str
    side: Literal["origin", "dest"]
