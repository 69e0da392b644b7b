"""
Reference system entity and its conversion registry.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from crsgraph.core.crs.discovery import discover_conversion, identity_conversion
from crsgraph.core.errors import NotConvertibleError
from crsgraph.models.crs import ConversionFunction, Coordinates, CoordinateOrder, CRSDescriptor

logger = logging.getLogger(__name__)

__all__ = [
    "ConversionRegistry",
    "ReferenceSystem",
    "RegistryEntry",
    "identity_conversion",
]


@dataclass(frozen=True)
class RegistryEntry:
    """
    A conversion stored in a registry.

    Attributes:
        function: The conversion function
        discovered: True if the entry was cached by path discovery
    """

    function: ConversionFunction
    discovered: bool = False


class ConversionRegistry:
    """
    Outgoing conversions of one reference system, keyed by target identity.

    Entries keep registration order. Direct entries are written by
    ``register``; discovered entries are written by ``cache`` and never
    replace a direct entry for the same target.
    """

    def __init__(self) -> None:
        self._entries: Dict["ReferenceSystem", RegistryEntry] = {}
        self._lock = threading.Lock()

    def register(self, target: "ReferenceSystem", function: ConversionFunction) -> None:
        with self._lock:
            self._entries[target] = RegistryEntry(function)

    def cache(self, target: "ReferenceSystem", function: ConversionFunction) -> None:
        with self._lock:
            existing = self._entries.get(target)
            if existing is not None and not existing.discovered:
                return
            self._entries[target] = RegistryEntry(function, discovered=True)

    def unregister(self, target: "ReferenceSystem") -> bool:
        """
        Drop the entry for target, direct or discovered.

        Returns:
            True if there was an entry
        """
        with self._lock:
            return self._entries.pop(target, None) is not None

    def get(self, target: "ReferenceSystem") -> Optional[ConversionFunction]:
        entry = self._entries.get(target)
        return entry.function if entry is not None else None

    def is_discovered(self, target: "ReferenceSystem") -> bool:
        entry = self._entries.get(target)
        return entry is not None and entry.discovered

    def direct_items(self) -> List[Tuple["ReferenceSystem", ConversionFunction]]:
        """Snapshot of direct entries in registration order."""
        with self._lock:
            return [
                (target, entry.function)
                for target, entry in self._entries.items()
                if not entry.discovered
            ]

    def items(self) -> List[Tuple["ReferenceSystem", RegistryEntry]]:
        """Snapshot of all entries in registration order."""
        with self._lock:
            return list(self._entries.items())

    def clear_discovered(self) -> int:
        """
        Drop every memoized path.

        Returns:
            Number of entries removed
        """
        with self._lock:
            stale = [target for target, entry in self._entries.items() if entry.discovered]
            for target in stale:
                del self._entries[target]
        return len(stale)

    def __contains__(self, target: object) -> bool:
        return target in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator["ReferenceSystem"]:
        return iter(list(self._entries))


class ReferenceSystem:
    """
    A coordinate reference system.

    Two systems describe the same space when ``equals`` says so: they are the
    same object, or share a non-empty well-known id, or share a non-empty WKT
    string. ``==`` and hashing stay identity based, so registries can key on
    the object itself.

    Args:
        description: A CRSDescriptor, a mapping with any of
            ``id``/``wkid``, ``authority``, ``wkt``, ``details``, or a plain
            string used as details
        conversions: Initial direct conversions, keyed by target system
    """

    def __init__(
        self,
        description: Union[CRSDescriptor, Mapping[str, Any], str, None] = None,
        conversions: Optional[Mapping["ReferenceSystem", ConversionFunction]] = None,
    ):
        if description is None:
            descriptor = CRSDescriptor()
        elif isinstance(description, CRSDescriptor):
            descriptor = description
        elif isinstance(description, str):
            descriptor = CRSDescriptor(details=description)
        elif isinstance(description, Mapping):
            descriptor = CRSDescriptor.from_dict(description)
        else:
            raise TypeError(
                f"Expected CRSDescriptor, mapping or string, got {type(description).__name__}"
            )

        self._descriptor = descriptor
        self.registry = ConversionRegistry()

        for target, function in (conversions or {}).items():
            self.registry.register(target, function)

    @classmethod
    def from_epsg(cls, epsg: int, wkt: Optional[str] = None) -> "ReferenceSystem":
        """Create a system identified by an EPSG code."""
        return cls(CRSDescriptor.from_epsg(epsg, wkt=wkt))

    @property
    def descriptor(self) -> CRSDescriptor:
        return self._descriptor

    @property
    def wkid(self) -> Optional[int]:
        return self._descriptor.wkid

    @property
    def authority(self) -> Optional[str]:
        return self._descriptor.authority

    @property
    def wkt(self) -> Optional[str]:
        return self._descriptor.wkt

    @property
    def details(self) -> Optional[str]:
        return self._descriptor.details

    @property
    def coordinate_order(self) -> CoordinateOrder:
        return self._descriptor.coordinate_order

    def equals(self, other: object) -> bool:
        """
        Return True if other represents the same spatial reference system.

        Args:
            other: Another reference system

        Returns:
            True for the same instance, a matching non-empty id, or a
            matching non-empty WKT
        """
        if other is self:
            return True
        if not isinstance(other, ReferenceSystem):
            return False
        if self.wkid and self.wkid == other.wkid:
            return True
        return bool(self.wkt) and self.wkt == other.wkt

    def register_conversion(self, target: "ReferenceSystem", function: ConversionFunction) -> None:
        """
        Set the direct conversion from this system to target.

        Replaces any earlier entry for target, direct or discovered. The
        function is not checked.
        """
        self.registry.register(target, function)

    def conversion_to(self, target: "ReferenceSystem") -> Optional[ConversionFunction]:
        """
        Return a function converting (x, y) pairs from this system to target.

        A registered or previously discovered conversion is returned as is;
        otherwise the conversion graph is searched and a successful result is
        cached.

        Returns:
            The conversion function, or None if the systems are not convertible
        """
        function = self.registry.get(target)
        if function is not None:
            return function
        return discover_conversion(self, target)

    def can_convert_to(self, target: "ReferenceSystem") -> bool:
        return self.conversion_to(target) is not None

    def require_conversion_to(self, target: "ReferenceSystem") -> ConversionFunction:
        """
        Like ``conversion_to``, for callers that cannot continue without one.

        Raises:
            NotConvertibleError: If the systems are not convertible
        """
        function = self.conversion_to(target)
        if function is None:
            logger.info(f"No conversion from {self!r} to {target!r}")
            raise NotConvertibleError(
                f"Cannot convert from {self} to {target}",
                source_crs=str(self),
                target_crs=str(target),
            )
        return function

    def project(self, target: "ReferenceSystem", coordinates) -> Optional[Coordinates]:
        """
        Convert one coordinate pair to target.

        Returns:
            The converted pair, or None if the systems are not convertible
        """
        function = self.conversion_to(target)
        if function is None:
            return None
        return function(coordinates)

    def known_targets(self) -> List["ReferenceSystem"]:
        """Systems this one has a registered or cached conversion to."""
        return list(self.registry)

    def display_label(self) -> str:
        """The id as text if present, else the WKT, else the details."""
        return self._descriptor.label

    def to_dict(self) -> dict:
        return self._descriptor.to_dict()

    def __str__(self) -> str:
        return self.display_label()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self._descriptor}')"
