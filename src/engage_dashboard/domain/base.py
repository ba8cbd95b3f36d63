"""Base model shared by every wire-facing domain schema."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Pydantic model serialized with camelCase keys.

    Attributes are snake_case in Python; input accepts either spelling.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=False,
    )

    def to_wire(self, **kwargs) -> dict:
        """Dump to a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)

    @classmethod
    def wire_keys(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        """Re-key ``data`` to camelCase so it can be merged over ``to_wire()``.

        Keys the model does not know are passed through unchanged.
        """
        aliases = {}
        for name, field in cls.model_fields.items():
            alias = field.alias or name
            aliases[name] = alias
            aliases[alias] = alias
        return {aliases.get(key, key): value for key, value in data.items()}
