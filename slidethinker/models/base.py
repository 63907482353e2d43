"""Shared base model for camelCase wire compatibility."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case fields in Python, camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Dump with camelCase keys, skipping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
