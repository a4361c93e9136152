"""Renderers for extracted documents."""

from .base import Renderer, placeholder_line
from .rst import DocumentationRenderer, render_book_index, render_chapter_index
from .source import ExerciseRenderer, SolutionsRenderer, SolvedRenderer

__all__ = [
    "DocumentationRenderer",
    "ExerciseRenderer",
    "Renderer",
    "SolutionsRenderer",
    "SolvedRenderer",
    "placeholder_line",
    "render_book_index",
    "render_chapter_index",
]
