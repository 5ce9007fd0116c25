# starburst/domain/entities/network.py
from dataclasses import dataclass, field

from starburst.domain.entities.geography import LatLng


@dataclass(frozen=True)
class Node:
    guid: str
    lat_e6: int
    lng_e6: int
    title: str = ""
    team: str = ""

    @property
    def pos(self) -> LatLng:
        return LatLng.from_e6(self.lat_e6, self.lng_e6)


@dataclass(frozen=True)
class EdgeEnd:
    """Endpoint reference of an edge; keeps coordinates even if the node is filtered out."""

    guid: str
    lat_e6: int
    lng_e6: int

    @classmethod
    def of(cls, node: Node) -> "EdgeEnd":
        return cls(node.guid, node.lat_e6, node.lng_e6)

    @property
    def pos(self) -> LatLng:
        return LatLng.from_e6(self.lat_e6, self.lng_e6)


@dataclass(frozen=True)
class Edge:
    guid: str
    team: str
    origin: EdgeEnd
    dest: EdgeEnd


@dataclass
class MapData:
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    timestamp: int = 0
    zoom_level: int = 0

    def find_node(self, guid: str) -> Node | None:
        return next((n for n in self.nodes if n.guid == guid), None)
