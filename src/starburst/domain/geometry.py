# starburst/domain/geometry.py
import numpy as np

from starburst.domain.entities.network import Edge, EdgeEnd, Node

Pt = tuple[float, float]


def segments_intersect(p1: Pt, p2: Pt, p3: Pt, p4: Pt) -> bool:
    """
    Parametric test of segment p1-p2 against p3-p4.
    Parallel or coincident segments (zero denominator) never intersect;
    touching at an endpoint counts as an intersection.
    """
    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = p3
    x4, y4 = p4
    denominator = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)
    if denominator == 0:
        return False
    ua = ((x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)) / denominator
    ub = ((x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)) / denominator
    return 0 <= ua <= 1 and 0 <= ub <= 1


def segments_intersect_many(p1: Pt, p2: Pt, starts: np.ndarray, ends: np.ndarray) -> np.ndarray:
    """
    Vectorized segments_intersect of one segment against N segments.
    starts/ends: float64 arrays of shape (N, 2). Returns a bool mask of shape (N,).
    """
    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = starts[:, 0], starts[:, 1]
    x4, y4 = ends[:, 0], ends[:, 1]
    denominator = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)
    nonzero = denominator != 0
    safe = np.where(nonzero, denominator, 1.0)
    ua = ((x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)) / safe
    ub = ((x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)) / safe
    return nonzero & (ua >= 0) & (ua <= 1) & (ub >= 0) & (ub <= 1)


def _same_spot(node: Node, end: EdgeEnd) -> bool:
    return node.lat_e6 == end.lat_e6 and node.lng_e6 == end.lng_e6


def edge_blocks_candidate(candidate: Node, target: Node, edge: Edge) -> bool:
    # an edge terminating at the candidate's own location never blocks it
    if _same_spot(candidate, edge.origin) or _same_spot(candidate, edge.dest):
        return False
    return segments_intersect(
        candidate.pos.as_tuple(),
        target.pos.as_tuple(),
        edge.origin.pos.as_tuple(),
        edge.dest.pos.as_tuple(),
    )
