# starburst/io/drawtools.py
import json
from collections.abc import Iterable
from pathlib import Path

from starburst.domain.entities.network import Node

DEFAULT_COLOR = "#a24ac3"


def _latlng(n: Node) -> dict:
    p = n.pos
    return {"lat": p.lat, "lng": p.lng}


def format_plan(
    nodes: Iterable[Node], target: Node, *, color: str = DEFAULT_COLOR, markers: bool = False
) -> list[dict]:
    """IITC draw-tools items: one node->target polyline per planned node."""
    items: list[dict] = []
    for n in nodes:
        items.append({"type": "polyline", "latLngs": [_latlng(n), _latlng(target)], "color": color})
        if markers:
            items.append({"type": "marker", "latLng": _latlng(n), "color": color})
    return items


def write_plan(path: str | Path, items: list[dict]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(items))
    return path
