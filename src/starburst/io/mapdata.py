# starburst/io/mapdata.py
import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from starburst.domain.entities.network import Edge, EdgeEnd, MapData, Node
from starburst.domain.errors import DatasetError


# Wire models for the map dump; unknown portal attributes are ignored
class PortalRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    guid: str = Field(alias="Guid")
    team: str = Field(default="", alias="Team")
    title: str | None = Field(default="", alias="Title")
    lat_e6: int = Field(alias="LatE6")
    lng_e6: int = Field(alias="LngE6")

    def to_node(self) -> Node:
        return Node(self.guid, self.lat_e6, self.lng_e6, title=self.title or "", team=self.team)


class LinkRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    guid: str = Field(alias="Guid")
    team: str = Field(alias="Team")
    orig: PortalRecord = Field(alias="Orig")
    dest: PortalRecord = Field(alias="Dest")

    def to_edge(self) -> Edge:
        return Edge(
            self.guid,
            self.team,
            EdgeEnd(self.orig.guid, self.orig.lat_e6, self.orig.lng_e6),
            EdgeEnd(self.dest.guid, self.dest.lat_e6, self.dest.lng_e6),
        )


class MapRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    timestamp: int = Field(default=0, alias="Timestamp")
    zoom_level: int = Field(default=0, alias="ZoomLevel")
    portals: list[PortalRecord] = Field(default_factory=list, alias="Portals")
    links: list[LinkRecord] = Field(default_factory=list, alias="Links")

    def to_map(self) -> MapData:
        return MapData(
            nodes=[p.to_node() for p in self.portals],
            edges=[lk.to_edge() for lk in self.links],
            timestamp=self.timestamp,
            zoom_level=self.zoom_level,
        )


def parse_map(payload: str | bytes | dict) -> MapData:
    try:
        if isinstance(payload, dict):
            rec = MapRecord.model_validate(payload)
        else:
            rec = MapRecord.model_validate_json(payload)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first["loc"])
        raise DatasetError(f"invalid map data at {loc or '<root>'}: {first['msg']}") from e
    return rec.to_map()


def load_map(path: str | Path) -> MapData:
    return parse_map(Path(path).read_bytes())


def dump_map(map_data: MapData) -> str:
    """Inverse of parse_map for fixtures and filtered snapshots."""

    def portal(guid, lat_e6, lng_e6, **extra):
        return {"Guid": guid, "LatE6": lat_e6, "LngE6": lng_e6, **extra}

    return json.dumps(
        {
            "Timestamp": map_data.timestamp,
            "ZoomLevel": map_data.zoom_level,
            "Portals": [
                portal(n.guid, n.lat_e6, n.lng_e6, Team=n.team, Title=n.title)
                for n in map_data.nodes
            ],
            "Links": [
                {
                    "Guid": e.guid,
                    "Team": e.team,
                    "Orig": portal(e.origin.guid, e.origin.lat_e6, e.origin.lng_e6),
                    "Dest": portal(e.dest.guid, e.dest.lat_e6, e.dest.lng_e6),
                }
                for e in map_data.edges
            ],
        }
    )
