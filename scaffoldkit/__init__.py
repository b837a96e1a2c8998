"""scaffoldkit -- scaffold new projects from configurable Handlebars templates.

A template is a directory holding a ``template.yaml`` manifest and a
``files/`` tree.  Files ending in ``.hbs`` are rendered with the resolved
variables, everything else is copied as-is, and optional post hooks run in
the generated project.
"""

__version__ = "1.0.0"
