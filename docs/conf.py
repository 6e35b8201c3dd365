# docs/conf.py  ── Sphinx configuration for vidme-kit
import os, sys
from importlib.metadata import version as pkg_version, PackageNotFoundError

# ── src layout: make vidme_kit importable without installing ---------------------
sys.path.insert(0, os.path.abspath("../src"))

# ── project metadata ------------------------------------------------------------
project   = "vidme-kit"
author    = "Jake Davis"
copyright = "2025, Jake Davis"

try:
    release = pkg_version("vidme-kit")         # e.g. 0.1.0
except PackageNotFoundError:
    from vidme_kit.__about__ import __version__ as release
version = ".".join(release.split(".")[:2])     # 0.1

# ── Sphinx behaviour ------------------------------------------------------------
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",     # Google-style docstrings used throughout vidme_kit
    "sphinx.ext.intersphinx",  # link requests / pandas types in signatures
    "sphinx.ext.viewcode",
    "sphinx.ext.githubpages",
    "myst_parser",             # README.md is the root document
]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "requests": ("https://requests.readthedocs.io/en/latest/", None),
    "pandas": ("https://pandas.pydata.org/docs/", None),
}

templates_path   = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

# ── HTML output ----------------------------------------------------------------
html_theme       = "sphinx_rtd_theme"
html_theme_options = {
    "collapse_navigation": False,
    "navigation_depth": 2,
}

autosummary_generate = True
autodoc_member_order = "bysource"
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}

root_doc = "README"
myst_heading_anchors = 2
