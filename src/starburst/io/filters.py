# starburst/io/filters.py
from starburst.domain.entities.geography import haversine_km
from starburst.domain.entities.network import MapData
from starburst.domain.errors import InvalidTarget


def filter_by_radius(map_data: MapData, target_guid: str, max_distance_km: float | None) -> MapData:
    """
    Keep nodes within max_distance_km of the target and edges with at least
    one endpoint inside the radius. None disables the filter.
    """
    target = map_data.find_node(target_guid)
    if target is None:
        raise InvalidTarget(target_guid)
    if max_distance_km is None:
        return map_data

    t = target.pos

    def inside(pos) -> bool:
        return haversine_km(t.lat, t.lng, pos.lat, pos.lng) <= max_distance_km

    return MapData(
        nodes=[n for n in map_data.nodes if inside(n.pos)],
        edges=[e for e in map_data.edges if inside(e.origin.pos) or inside(e.dest.pos)],
        timestamp=map_data.timestamp,
        zoom_level=map_data.zoom_level,
    )
