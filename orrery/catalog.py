#!/usr/bin/env python3
"""
Celestial body catalogs: the built-in solar system and JSON catalog loading.

Schema
======
Catalog JSON (catalogs/*.json):
{
  "name": "Human-friendly catalog name",
  "central": {
    "name": "Sun",
    "texture": "resources/images/sun.jpeg",
    "diameter": 1392684,               # km
    "rotational_velocity": 0,          # km/h
    "orbital_radius": 0,               # 10^6 km
    "orbital_period": 0,               # days
    "orbital_inclination": 0,          # degrees
    "color": [255, 204, 0]             # optional
  },
  "orbiting": [ {record}, ... ],       # in orbital order
  "satellite": {record},
  "satellite_host_index": 2            # optional, index into "orbiting"
}

Users can add their own JSON files into the catalogs folder and they'll be picked up
by the loader. Unlike scene presets, a broken catalog is never skipped silently: any
malformed or out-of-range value raises CatalogError before a tree is built.
"""
import json
import logging
import math
import os
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Tuple, Union

from .constants import DEFAULT_SATELLITE_HOST_INDEX
from .data_models import CelestialBodyRecord
from .scaling import scale_orbital_radius

logger = logging.getLogger(__name__)

CATALOGS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "catalogs")


class CatalogError(ValueError):
    """A catalog record or file is invalid."""


@dataclass(frozen=True)
class Catalog:
    """Read-only table of bodies for one planetary system."""
    name: str
    central: CelestialBodyRecord
    orbiting: Tuple[CelestialBodyRecord, ...]
    satellite: CelestialBodyRecord
    satellite_host_index: int = DEFAULT_SATELLITE_HOST_INDEX

    def __len__(self) -> int:
        return 1 + len(self.orbiting) + 1


SUN = CelestialBodyRecord("Sun", "resources/images/sun.jpeg", 1392684, 0, 0, 0, 0, (255, 204, 0))

MOON = CelestialBodyRecord("Moon", "resources/images/moon.jpeg", 3475, 16.7, 0.384, 27.3, 5.1, (200, 200, 200))

# https://nssdc.gsfc.nasa.gov/planetary/factsheet/
# https://sos.noaa.gov/catalog/datasets/planet-rotations/
PLANETS = (
    CelestialBodyRecord("Mercury", "resources/images/mercury.jpeg", 4879, 10.83, 57.9, 88, 7.0, (169, 169, 169)),
    CelestialBodyRecord("Venus", "resources/images/venus.jpeg", 12104, 6.52, 108.2, 224.7, 3.4, (230, 190, 120)),
    CelestialBodyRecord("Earth", "resources/images/earth.jpeg", 12756, 1574, 149.6, 365.2, 0, (100, 149, 237)),
    CelestialBodyRecord("Mars", "resources/images/mars.jpeg", 6792, 866, 228, 687, 1.8, (193, 68, 14)),
    CelestialBodyRecord("Jupiter", "resources/images/jupiter.jpeg", 142984, 45583, 778.5, 4331, 1.3, (216, 170, 120)),
    CelestialBodyRecord("Saturn", "resources/images/saturn.jpeg", 120536, 36840, 1432, 10747, 2.5, (226, 204, 150)),
    CelestialBodyRecord("Uranus", "resources/images/uranus.jpeg", 51118, 14798, 2867, 30589, 0.8, (160, 220, 230)),
    CelestialBodyRecord("Neptune", "resources/images/neptune.jpeg", 49528, 9719, 4515, 59800, 1.8, (80, 110, 220)),
)

SOLAR_SYSTEM = Catalog("Solar System", SUN, PLANETS, MOON)


def _check_finite(record: CelestialBodyRecord) -> None:
    for fld in ("diameter", "rotational_velocity", "orbital_radius", "orbital_period", "orbital_inclination"):
        value = getattr(record, fld)
        if not math.isfinite(value):
            raise CatalogError(f"{record.name}: {fld} must be finite, got {value!r}")


def validate_record(record: CelestialBodyRecord, central: bool = False) -> None:
    """
    Check one record against the ranges the scaling functions accept.

    The central body only needs a positive diameter; orbiting bodies and satellites
    also need a positive orbital radius and period.
    """
    _check_finite(record)
    if record.diameter <= 0:
        raise CatalogError(f"{record.name}: diameter must be positive, got {record.diameter!r}")
    if record.rotational_velocity < 0:
        raise CatalogError(
            f"{record.name}: rotational_velocity must be non-negative, got {record.rotational_velocity!r}"
        )
    if central:
        return
    if record.orbital_radius <= 0:
        raise CatalogError(f"{record.name}: orbital_radius must be positive, got {record.orbital_radius!r}")
    if record.orbital_period <= 0:
        raise CatalogError(f"{record.name}: orbital_period must be positive, got {record.orbital_period!r}")


def validate_catalog(catalog: Catalog) -> None:
    """
    Validate every record of a catalog; raises CatalogError on the first bad one.

    Orbiting bodies are placed on a logarithmic scale, so their radius must also
    land beyond the central body after scaling. The satellite is scaled linearly.
    """
    try:
        validate_record(catalog.central, central=True)
        for record in catalog.orbiting:
            validate_record(record)
            if scale_orbital_radius(record.orbital_radius) <= 0:
                raise CatalogError(
                    f"{record.name}: orbital_radius {record.orbital_radius!r} scales to a non-positive distance"
                )
        validate_record(catalog.satellite)
        if not 0 <= catalog.satellite_host_index < len(catalog.orbiting):
            raise CatalogError(
                f"satellite_host_index {catalog.satellite_host_index} out of range for "
                f"{len(catalog.orbiting)} orbiting bodies"
            )
    except CatalogError as e:
        logger.error("Rejected catalog %r: %s", catalog.name, e)
        raise


def _coerce_color(c: Any) -> Tuple[int, int, int]:
    try:
        r, g, b = int(c[0]), int(c[1]), int(c[2])
    except (TypeError, ValueError, IndexError) as e:
        raise CatalogError(f"color must be three integers, got {c!r}") from e
    return (max(0, min(255, r)), max(0, min(255, g)), max(0, min(255, b)))


def record_from_dict(data: Dict[str, Any]) -> CelestialBodyRecord:
    """Build a record from its JSON form."""
    if not isinstance(data, dict):
        raise CatalogError(f"body entry must be an object, got {type(data).__name__}")
    name = data.get("name", "Body")
    try:
        record = CelestialBodyRecord(
            name=str(name),
            texture=str(data.get("texture", "")),
            diameter=float(data["diameter"]),
            rotational_velocity=float(data.get("rotational_velocity", 0.0)),
            orbital_radius=float(data.get("orbital_radius", 0.0)),
            orbital_period=float(data.get("orbital_period", 0.0)),
            orbital_inclination=float(data.get("orbital_inclination", 0.0)),
        )
    except KeyError as e:
        raise CatalogError(f"{name}: missing field {e.args[0]!r}") from e
    except (TypeError, ValueError) as e:
        raise CatalogError(f"{name}: {e}") from e
    if "color" in data:
        record = replace(record, color=_coerce_color(data["color"]))
    return record


def catalog_from_dict(data: Dict[str, Any], default_name: str = "Catalog") -> Catalog:
    if not isinstance(data, dict):
        raise CatalogError("catalog must be a JSON object")
    try:
        central = record_from_dict(data["central"])
        orbiting = tuple(record_from_dict(b) for b in data["orbiting"])
        satellite = record_from_dict(data["satellite"])
    except KeyError as e:
        raise CatalogError(f"catalog is missing {e.args[0]!r}") from e
    except TypeError as e:
        raise CatalogError(f"catalog has a malformed body list: {e}") from e
    host_index = data.get("satellite_host_index", DEFAULT_SATELLITE_HOST_INDEX)
    if not isinstance(host_index, int) or isinstance(host_index, bool):
        raise CatalogError(f"satellite_host_index must be an integer, got {host_index!r}")
    catalog = Catalog(
        name=str(data.get("name") or default_name),
        central=central,
        orbiting=orbiting,
        satellite=satellite,
        satellite_host_index=host_index,
    )
    validate_catalog(catalog)
    return catalog


def list_catalogs() -> List[Tuple[str, str]]:
    """Return list of (file_name, display_name) for available catalogs."""
    items: List[Tuple[str, str]] = []
    if not os.path.isdir(CATALOGS_DIR):
        return items
    for fn in sorted(os.listdir(CATALOGS_DIR)):
        if not fn.lower().endswith(".json"):
            continue
        display = os.path.splitext(fn)[0]
        try:
            with open(os.path.join(CATALOGS_DIR, fn), "r", encoding="utf-8") as f:
                display = json.load(f).get("name") or display
        except (OSError, ValueError, AttributeError) as e:
            logger.warning("Unreadable catalog %s: %s", fn, e)
        items.append((fn, display))
    return items


def load_catalog(path: Union[str, os.PathLike]) -> Catalog:
    """
    Load and validate a catalog JSON file.

    A bare file name is looked up in the catalogs directory.
    """
    path = os.fspath(path)
    if not os.path.dirname(path) and not os.path.exists(path):
        path = os.path.join(CATALOGS_DIR, path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise CatalogError(f"cannot read catalog {path}: {e}") from e
    except ValueError as e:
        raise CatalogError(f"catalog {path} is not valid JSON: {e}") from e
    catalog = catalog_from_dict(data, default_name=os.path.splitext(os.path.basename(path))[0])
    logger.info("Loaded catalog %r from %s (%d bodies)", catalog.name, path, len(catalog))
    return catalog
