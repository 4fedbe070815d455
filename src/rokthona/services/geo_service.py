import json
import logging
from pathlib import Path

from rokthona.core.errors import NotFound
from rokthona.data_access.dynamodb import DynamoDataAccess
from rokthona.models.geo import District, Upazila

logger = logging.getLogger(__name__)

DISTRICT_FILE = "district.json"
UPAZILA_FILE = "upazila.json"


def _records(payload) -> list[dict]:
    """Accept a plain list of rows or a phpMyAdmin JSON export (rows under the table entry)."""
    if isinstance(payload, dict):
        payload = [payload]
    rows = []
    for entry in payload:
        if entry.get("type") == "table":
            rows.extend(entry.get("data", []))
        elif "type" not in entry:
            rows.append(entry)
    return rows


def _load(path: Path) -> list[dict]:
    if not path.is_file():
        raise NotFound(f"Seed file {path} not found")
    with path.open(encoding="utf-8") as handle:
        return _records(json.load(handle))


class GeoService:
    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    def list_districts(self) -> list[dict]:
        return self.data_access.list_districts()

    def list_upazilas(self, district_id: str | None = None) -> list[dict]:
        return self.data_access.list_upazilas(district_id)

    def seed(self, data_dir: str) -> dict:
        base = Path(data_dir)
        districts = [District.model_validate(row) for row in _load(base / DISTRICT_FILE)]
        upazilas = [Upazila.model_validate(row) for row in _load(base / UPAZILA_FILE)]

        result = {
            "districts": self.data_access.put_districts(districts),
            "upazilas": self.data_access.put_upazilas(upazilas),
        }
        logger.info(f"Seeded {result['districts']} districts and {result['upazilas']} upazilas from {base}")
        return result
