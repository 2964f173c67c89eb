"""Base model for ativmob values.

Every model inherits from :class:`AtivMobBaseModel`, which makes
instances immutable and lets API payloads use their wire names
(``sigla``/``nome``/``regiao``) while Python code uses the field names.
Unknown keys in a payload are ignored.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class AtivMobBaseModel(BaseModel):
    """Frozen pydantic base shared by every ativmob model."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    def merge(self, **changes: Any) -> Self:
        """Return a validated copy with *changes* applied.

        Unlike ``model_copy(update=...)`` the result goes through the
        model validators again, so invariants hold for every copy.
        """
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return type(self).model_validate(values)
