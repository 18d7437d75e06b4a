"""Contrast title lookup loaded at worker startup."""

from gsa_api.titles.index import ContrastTitleIndex, load_contrast_titles

__all__ = [
    "ContrastTitleIndex",
    "load_contrast_titles",
]
