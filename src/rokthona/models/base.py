from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


Role = Literal["donor", "recipient", "volunteer", "admin"]
ROLES: tuple[str, ...] = ("donor", "recipient", "volunteer", "admin")


def _normalise_blood_group(value):
    if isinstance(value, str):
        return value.strip().upper()
    return value


BloodGroup = Annotated[
    Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"],
    BeforeValidator(_normalise_blood_group),
]


class CamelModel(BaseModel):
    """Stored with snake_case keys, served to clients with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
