"""Stats sidecar written next to every minified output."""

from pathlib import Path

from pydantic import Field

from minify_bench.models.base import Model


class StatsRecord(Model):
    """Timing and size measurements of one minifier run.

    Serialized as ``{"time": ..., "size": ..., "brotliSize": ...}``. Every
    field is required and unknown fields are rejected.
    """

    time: float = Field(..., ge=0, description="Transform wall-clock time in ms")
    size: int = Field(..., ge=0, description="Output size in bytes")
    brotli_size: int = Field(
        ..., ge=0, alias="brotliSize", description="Brotli-compressed size in bytes"
    )

    def to_json(self) -> str:
        """Serialize to the sidecar JSON format."""
        return self.model_dump_json(by_alias=True, indent=2) + "\n"

    @classmethod
    def read(cls, path: Path) -> "StatsRecord":
        """Read and validate a sidecar file.

        Raises:
            pydantic.ValidationError: If the sidecar is not valid JSON for the schema
            OSError: If the sidecar cannot be read

        """
        return cls.model_validate_json(path.read_bytes())
