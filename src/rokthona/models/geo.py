from pydantic import Field, field_validator

from rokthona.models.base import CamelModel


class _GeoRecord(CamelModel):
    id: str
    name: str
    bn_name: str | None = None
    url: str | None = None

    # Seed files carry ids and coordinates both as strings and as numbers.
    @field_validator("id", "district_id", "division_id", "lat", "lon", mode="before", check_fields=False)
    @classmethod
    def _stringify(cls, value):
        if isinstance(value, (int, float)):
            return str(value)
        return value

class District(_GeoRecord):
    division_id: str | None = None
    lat: str | None = None
    lon: str | None = Field(None, alias="long")

class Upazila(_GeoRecord):
    district_id: str
