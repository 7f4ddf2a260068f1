"""Sphinx configuration for the text snippets documentation.

API pages are generated by sphinx-autoapi from the package docstrings.
"""

import sys
import tomllib
from pathlib import Path

project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))


def get_version_from_pyproject() -> str:
    """Read version from pyproject.toml to maintain single source of truth."""
    with open(project_root / "pyproject.toml", "rb") as f:
        data = tomllib.load(f)
    return data["project"]["version"]


# -- Project information -----------------------------------------------------
project = "Text Snippets"
author = "Text Snippets contributors"
release = get_version_from_pyproject()
version = release

# -- General configuration ---------------------------------------------------
extensions = [
    "autoapi.extension",
    "sphinx.ext.napoleon",  # Google-style docstrings
    "sphinx.ext.viewcode",
    "sphinx.ext.intersphinx",
    "myst_parser",  # Markdown pages
]

autoapi_type = "python"
autoapi_dirs = [str(project_root / "src" / "text_snippets")]
autoapi_options = ["members", "undoc-members", "show-inheritance", "show-module-summary"]
autoapi_member_order = "bysource"
autoapi_python_class_content = "both"

napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_attr_annotations = True

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
}

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}
myst_heading_anchors = 3

# -- HTML output options -----------------------------------------------------
html_theme = "sphinx_rtd_theme"
