"""Sphinx configuration for pgnormalize documentation."""

import os
import sys

# Add src/ to path so Sphinx can import pgnormalize modules directly
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

project = "pgnormalize"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_autodoc_typehints",
    "sphinx_copybutton",
]

# Napoleon (Google-style docstrings)
napoleon_google_docstring = True
napoleon_numpy_docstring = False

# Theme
html_theme = "furo"
html_title = "pgnormalize"

# Autodoc
autodoc_member_order = "bysource"
autodoc_typehints = "description"

# pglast wraps libpg_query in a compiled extension; mock it so the pure-Python
# API can be documented without building it.
autodoc_mock_imports = ["pglast"]

# Intersphinx
intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "pglast": ("https://pglast.readthedocs.io/en/latest/", None),
}

# General
exclude_patterns = ["_build"]
