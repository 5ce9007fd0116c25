# runtime/registries.py
from collections.abc import Callable

from starburst.app.protocols import NeutralizationSelector
from starburst.config.models import SelectorIncrementalModel, SelectorScanModel, SelectorUnion
from starburst.planner.selectors import IncrementalSelector, ScanSelector

SelectorFactory = Callable[[SelectorUnion], NeutralizationSelector]

_selector_registry: dict[str, SelectorFactory] = {}


def register_selector(kind: str):
    def deco(fn: SelectorFactory):
        _selector_registry[kind] = fn
        return fn

    return deco


def make_selector(cfg: SelectorUnion) -> NeutralizationSelector:
    try:
        factory = _selector_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown selector kind {cfg.kind!r}")
    return factory(cfg)


@register_selector("scan")
def _make_scan(cfg: SelectorScanModel):
    return ScanSelector()


@register_selector("incremental")
def _make_incremental(cfg: SelectorIncrementalModel):
    return IncrementalSelector()
