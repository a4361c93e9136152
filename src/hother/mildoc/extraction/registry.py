"""
Renderer registry system.
"""

from pydantic import BaseModel, ConfigDict, Field

from hother.mildoc.core.models import Document, Rendering
from hother.mildoc.utils.logging import get_logger

from .renderers.base import Renderer

logger = get_logger(__name__)


class RendererRegistry(BaseModel):
    """Registry of the renderings produced for each document."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    renderers: dict[str, Renderer] = Field(default_factory=dict, description="Registered renderers, in registration order")

    def register(self, renderer: Renderer) -> None:
        """
        Register a renderer.

        Args:
            renderer: The renderer to register
        """
        if renderer.name in self.renderers:
            logger.warning(f"Overwriting existing renderer: {renderer.name}")
        self.renderers[renderer.name] = renderer
        logger.debug(f"Registered renderer: {renderer.name}")

    def get_renderer(self, name: str) -> Renderer | None:
        """
        Get a renderer by name.

        Args:
            name: The rendering name to look up

        Returns:
            Renderer if found, None otherwise
        """
        return self.renderers.get(name)

    def list_names(self) -> list[str]:
        """Get names of registered renderers in registration order."""
        return list(self.renderers)

    def select(self, names: list[str]) -> "RendererRegistry":
        """
        Narrow the registry to the given renderers.

        The result keeps registration order; the order of names is ignored.

        Raises:
            ValueError: If a name is not registered
        """
        unknown = [name for name in names if name not in self.renderers]
        if unknown:
            raise ValueError(f"Unknown renderer(s): {', '.join(unknown)}; available: {', '.join(self.list_names())}")
        return RendererRegistry(renderers={name: self.renderers[name] for name in self.renderers if name in names})

    def render(self, document: Document) -> dict[str, Rendering]:
        """Run every registered renderer over a document."""
        return {name: renderer.render(document) for name, renderer in self.renderers.items()}

    @classmethod
    def create_default(cls, placeholder: str = "...") -> "RendererRegistry":
        """Create registry with the default renderers."""
        from .renderers import DocumentationRenderer, ExerciseRenderer, SolutionsRenderer, SolvedRenderer

        registry = cls()

        registry.register(SolvedRenderer())
        registry.register(ExerciseRenderer(placeholder=placeholder))
        registry.register(SolutionsRenderer())
        registry.register(DocumentationRenderer(placeholder=placeholder))

        return registry


def render_document(document: Document, registry: RendererRegistry | None = None) -> dict[str, Rendering]:
    """
    Render a document with every renderer of a registry.

    Args:
        document: The extracted document
        registry: Renderers to run (defaults if None)

    Returns:
        Renderings keyed by renderer name
    """
    if registry is None:
        registry = RendererRegistry.create_default()
    return registry.render(document)
