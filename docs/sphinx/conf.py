# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for ShapeQL documentation."""

project = "ShapeQL"
author = "ShapeQL Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_member_order = "bysource"

html_theme = "alabaster"
