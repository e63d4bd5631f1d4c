"""GeoJSON FeatureCollections returned by ``format=geojson`` queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from shapely.errors import ShapelyError
from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry

from dawa.errors import DecodeError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Feature:
    """A geometry (``None`` when the service sent none) and its properties."""

    geometry: Optional[BaseGeometry]
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, obj: Any) -> "Feature":
        if not isinstance(obj, dict) or obj.get("type") != "Feature":
            raise DecodeError(f"expected a GeoJSON Feature, got {str(obj)[:80]!r}")
        geom = obj.get("geometry")
        try:
            geometry = shape(geom) if geom else None
        except (ShapelyError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise DecodeError(f"invalid GeoJSON geometry: {exc}") from exc
        return cls(geometry=geometry, properties=dict(obj.get("properties") or {}))

    def to_json(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": mapping(self.geometry) if self.geometry is not None else None,
            "properties": self.properties,
        }


@dataclass(slots=True)
class FeatureCollection:
    features: List[Feature] = field(default_factory=list)
    crs: Optional[Dict[str, Any]] = None

    @classmethod
    def from_json(cls, obj: Any) -> "FeatureCollection":
        if not isinstance(obj, dict) or obj.get("type") != "FeatureCollection":
            raise DecodeError("expected a GeoJSON FeatureCollection")
        features = [Feature.from_json(f) for f in obj.get("features") or []]
        logger.debug("decoded FeatureCollection with %d features", len(features))
        return cls(features=features, crs=obj.get("crs"))

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": "FeatureCollection",
            "features": [f.to_json() for f in self.features],
        }
        if self.crs is not None:
            out["crs"] = self.crs
        return out

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)
