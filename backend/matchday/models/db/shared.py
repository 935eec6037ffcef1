from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseModelORM(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CamelModel(BaseModel):
    """Request and response bodies whose JSON keys are camelCase, e.g. `mainRefereeId`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
