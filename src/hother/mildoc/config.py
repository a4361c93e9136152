"""Build configuration loaded from environment variables and ``.env``."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hother.mildoc.core.models import MarkerSyntax
from hother.mildoc.extraction.registry import RendererRegistry

DEFAULT_OUTPUT_DIRS = {
    "solved": "solved",
    "exercise": "exercises",
    "solutions": "solutions",
    "docs": "source",
}


class MildocSettings(BaseSettings):
    """Settings for a manuscript build. Command-line flags override them."""

    log_level: str = "INFO"
    json_logs: bool = False

    strict: bool = Field(default=False, description="Fail on regions left open at end of input")
    placeholder: str = Field(default="...", min_length=1, description="Stands in for solution code in exercises")
    source_suffix: str = ".lean"
    markers: MarkerSyntax = Field(default_factory=MarkerSyntax)

    renderers: list[str] = Field(default_factory=lambda: list(DEFAULT_OUTPUT_DIRS))
    output_dirs: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_OUTPUT_DIRS))
    write_indexes: bool = Field(default=True, description="Write chapter index pages with the docs rendering")

    max_workers: int = Field(default=8, ge=1)
    timeout: float | None = Field(default=None, gt=0, description="Deadline for the whole batch, in seconds")

    model_config = SettingsConfigDict(
        env_prefix="MILDOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("source_suffix")
    @classmethod
    def _dotted_suffix(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError(f"source_suffix must start with '.', got {value!r}")
        return value

    def output_dir(self, renderer_name: str) -> str:
        """Output subdirectory of a rendering."""
        return self.output_dirs.get(renderer_name, renderer_name)

    def build_registry(self) -> RendererRegistry:
        """
        Registry of the enabled renderers.

        Raises:
            ValueError: If an enabled renderer is unknown
        """
        return RendererRegistry.create_default(placeholder=self.placeholder).select(self.renderers)
