"""Pydantic base for the run configuration and for records read across processes."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model that rejects unknown fields.

    Aliased fields also accept their Python name, so JSON written by another
    process and keyword construction in tests go through the same schema.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)
