"""
Conversion path discovery between reference systems.

Reference systems and their conversion registries form a directed graph: an
edge A -> B exists when A has a direct conversion registered for B. When a
caller asks for a conversion that is not registered, the functions in this
module search that graph, compose the edge functions along the path found,
and memoize the composed function in the source registry.

Two strategies are available:

- ``depth_first``: follows registration order and returns the first path it
  finds. Every node on a successful path caches its own composed conversion.
- ``breadth_first``: returns a path with the fewest hops and caches only on
  the source.

Neither strategy raises when no path exists; they return None.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Deque, Dict, Iterator, List, Optional, Set, Tuple

from crsgraph.core.config import get_settings
from crsgraph.core.errors import ConfigurationError
from crsgraph.models.crs import ConversionFunction, Coordinates

if TYPE_CHECKING:
    from crsgraph.core.crs.reference_system import ReferenceSystem

logger = logging.getLogger(__name__)


def identity_conversion(coordinates) -> Coordinates:
    """Conversion between a system and itself."""
    x, y = coordinates
    return (x, y)


class ComposedConversion:
    """
    Conversions applied one after another.

    Steps are kept flat, so a long path is applied in a loop rather than
    through nested calls.
    """

    __slots__ = ("steps",)

    def __init__(self, steps: Tuple[ConversionFunction, ...]):
        self.steps = steps

    def __call__(self, coordinates) -> Coordinates:
        for step in self.steps:
            coordinates = step(coordinates)
        return coordinates

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self.steps)} steps)"


def _steps(function: ConversionFunction) -> Tuple[ConversionFunction, ...]:
    if isinstance(function, ComposedConversion):
        return function.steps
    return (function,)


def compose(first: ConversionFunction, second: ConversionFunction) -> ConversionFunction:
    """
    Chain two conversions.

    Args:
        first: Conversion applied first (A -> B)
        second: Conversion applied to the result (B -> C)

    Returns:
        Conversion A -> C
    """
    return ComposedConversion(_steps(first) + _steps(second))


@dataclass
class _Frame:
    """A system on the current search path and the edge taken out of it."""

    system: "ReferenceSystem"
    neighbors: Iterator[Tuple["ReferenceSystem", ConversionFunction]]
    edge: Optional[ConversionFunction] = None


def depth_first_discovery(
    source: "ReferenceSystem",
    target: "ReferenceSystem",
) -> Optional[ConversionFunction]:
    """
    Find the first conversion path from source to target in registration order.

    The search keeps its own stack, so path length is not limited by the
    interpreter's recursion limit. A system already on the current path is
    treated as a dead end, which keeps cycles from looping forever. Every
    system on the path found caches its own composed conversion to target.

    Args:
        source: System to convert from
        target: System to convert to

    Returns:
        Composed conversion, or None when no path exists
    """
    if source.equals(target):
        return identity_conversion

    path: List[_Frame] = [_Frame(source, iter(source.registry.direct_items()))]
    on_path: Set["ReferenceSystem"] = {source}
    found: Optional[ConversionFunction] = None

    while path:
        frame = path[-1]
        step = next(frame.neighbors, None)

        if step is None:
            path.pop()
            on_path.discard(frame.system)
            continue

        neighbor, edge = step
        if neighbor.equals(target):
            found = edge
            break
        if neighbor in on_path:
            continue

        frame.edge = edge
        on_path.add(neighbor)
        path.append(_Frame(neighbor, iter(neighbor.registry.direct_items())))

    if found is None:
        logger.debug(f"No conversion path from {source!r} to {target!r}")
        return None

    result = found
    for depth, frame in enumerate(reversed(path)):
        if depth:
            result = compose(frame.edge, result)
        frame.system.registry.cache(target, result)

    logger.debug(f"Cached discovered conversion {source!r} -> {target!r} ({len(path)} systems)")
    return result


def breadth_first_discovery(
    source: "ReferenceSystem",
    target: "ReferenceSystem",
) -> Optional[ConversionFunction]:
    """
    Find a conversion path from source to target with the fewest hops.

    Args:
        source: System to convert from
        target: System to convert to

    Returns:
        Composed conversion, or None when no path exists
    """
    if source.equals(target):
        return identity_conversion

    visited: Set["ReferenceSystem"] = {source}
    queue: Deque[Tuple["ReferenceSystem", Optional[ConversionFunction]]] = deque([(source, None)])

    while queue:
        node, so_far = queue.popleft()
        for neighbor, edge in node.registry.direct_items():
            step = edge if so_far is None else compose(so_far, edge)

            if neighbor.equals(target):
                source.registry.cache(target, step)
                logger.debug(f"Cached discovered conversion {source!r} -> {target!r}")
                return step

            if neighbor not in visited:
                visited.add(neighbor)
                queue.append((neighbor, step))

    logger.debug(f"No conversion path from {source!r} to {target!r}")
    return None


STRATEGIES: Dict[str, Callable[["ReferenceSystem", "ReferenceSystem"], Optional[ConversionFunction]]] = {
    "depth_first": depth_first_discovery,
    "breadth_first": breadth_first_discovery,
}


def discover_conversion(
    source: "ReferenceSystem",
    target: "ReferenceSystem",
    strategy: Optional[str] = None,
) -> Optional[ConversionFunction]:
    """
    Search for a conversion from source to target.

    Args:
        source: System to convert from
        target: System to convert to
        strategy: 'depth_first' or 'breadth_first'; defaults to the
            ``discovery_strategy`` setting

    Returns:
        Composed conversion, or None when no path exists

    Raises:
        ConfigurationError: If the strategy name is unknown
    """
    name = strategy or get_settings().discovery_strategy
    try:
        search = STRATEGIES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown discovery strategy: {name}",
            config_key="discovery_strategy",
            details={"available": sorted(STRATEGIES)},
        )

    return search(source, target)
