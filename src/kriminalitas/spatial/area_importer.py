"""Load area (kecamatan) polygons from a GeoJSON FeatureCollection into PostGIS."""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from sqlalchemy.dialects.postgresql import insert
from tqdm import tqdm

from kriminalitas.models.base import Store
from kriminalitas.models.spatial import Area
from kriminalitas.spatial.geometry import geometry_from_geojson
from kriminalitas.utils.config import settings
from kriminalitas.utils.logging import get_logger

logger = get_logger(__name__)

# Column -> source property, matched case-insensitively
TEXT_PROPERTIES = {
    "metadata_source": "METADATA",
    "srs_id": "SRS_ID",
    "province": "WADMPR",
    "regency": "WADMKK",
    "district": "WADMKC",
    "village": "WADMKD",
    "uupp": "UUPP",
}

INTEGER_PROPERTIES = {
    "population_total": "JUMLAH_PENDUDUK",
    "population_male": "LAKI_LAKI",
    "population_female": "PEREMPUAN",
}

FLOAT_PROPERTIES = {
    "population_density": "KEPADATAN",
    "land_area": "LUAS",
}


@dataclass
class ImportResult:
    inserted: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.skipped


def _lookup(properties: Mapping[str, Any], key: str) -> Any:
    if key in properties:
        return properties[key]
    lowered = key.lower()
    for name, value in properties.items():
        if name.lower() == lowered:
            return value
    return None


def _text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def to_number(value: Any, cast=float) -> Union[int, float]:
    """Coerce a numeric-looking property, falling back to 0.

    Handles thousands separators written as ``1,234`` and blank strings.
    """
    if value is None or isinstance(value, bool):
        return cast(0)
    if isinstance(value, (int, float)):
        return cast(value)
    cleaned = str(value).strip().replace(",", "")
    if not cleaned:
        return cast(0)
    try:
        return cast(float(cleaned))
    except ValueError:
        return cast(0)


def prepare_area_row(feature: Mapping[str, Any]) -> Dict[str, Any]:
    """Map one feature's property bag to ``areas`` column values.

    The geometry is left out; :class:`AreaImporter` attaches it as a
    PostGIS expression.

    Raises:
        ValueError: If the feature has no usable ``id`` or no geometry
    """
    properties = feature.get("properties") or {}
    if not feature.get("geometry"):
        raise ValueError("Feature has no geometry")

    raw_id = _lookup(properties, "id")
    if raw_id is None:
        raw_id = feature.get("id")
    try:
        area_id = int(raw_id)
    except (TypeError, ValueError):
        raise ValueError(f"Feature has an invalid id: {raw_id!r}") from None

    row: Dict[str, Any] = {"id": area_id}
    for column, key in TEXT_PROPERTIES.items():
        row[column] = _text_or_none(_lookup(properties, key))
    for column, key in INTEGER_PROPERTIES.items():
        row[column] = to_number(_lookup(properties, key), int)
    for column, key in FLOAT_PROPERTIES.items():
        row[column] = to_number(_lookup(properties, key), float)

    row["name"] = _text_or_none(_lookup(properties, "name")) or row["district"]
    return row


def load_feature_collection(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a GeoJSON FeatureCollection fully into memory.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document is not a FeatureCollection
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"GeoJSON file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise ValueError(f"{path} is not a GeoJSON FeatureCollection")
    if not isinstance(data.get("features"), list):
        raise ValueError(f"{path} has no features list")
    return data


class AreaImporter:
    """Insert-if-absent importer for area polygons.

    Re-running against the same collection inserts nothing: conflicts on the
    primary key are skipped and existing rows are never updated.
    """

    def __init__(self, store: Store, srid: int = settings.spatial.srid):
        self.store = store
        self.srid = srid

    def build_insert(self, feature: Mapping[str, Any]):
        row = prepare_area_row(feature)
        return (
            insert(Area)
            .values(**row, geom=geometry_from_geojson(feature["geometry"], self.srid))
            .on_conflict_do_nothing(index_elements=["id"])
        )

    def import_features(
        self, features: Iterable[Mapping[str, Any]], show_progress: bool = False
    ) -> ImportResult:
        """Insert features one by one inside a single transaction.

        Any error aborts the run and rolls back every insert made so far.
        """
        features: List[Mapping[str, Any]] = list(features)
        result = ImportResult()

        progress = None
        if show_progress:
            progress = tqdm(total=len(features), desc="Importing areas", unit="areas")

        try:
            with self.store.transaction() as session:
                for feature in features:
                    outcome = session.execute(self.build_insert(feature))
                    if outcome.rowcount:
                        result.inserted += 1
                    else:
                        result.skipped += 1
                    if progress:
                        progress.update(1)
        finally:
            if progress:
                progress.close()

        logger.info(
            "Area import complete",
            features=len(features),
            inserted=result.inserted,
            skipped=result.skipped,
        )
        return result

    def import_file(self, path: Union[str, Path], show_progress: bool = False) -> ImportResult:
        collection = load_feature_collection(path)
        logger.info("Loaded feature collection", path=str(path), features=len(collection["features"]))
        return self.import_features(collection["features"], show_progress=show_progress)
