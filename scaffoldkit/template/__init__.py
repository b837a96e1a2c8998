"""Template loading, rendering and static analysis.

Quick usage::

    from scaffoldkit.template import TemplateContext, TemplateEngine, load_template

    template = load_template("templates/cli")
    engine = TemplateEngine()
    print(engine.render_filename("{{kebabCase projectName}}.py.hbs",
                                 TemplateContext({"projectName": "MyTool"})))
"""

from scaffoldkit.template.context import ContextValue, TemplateContext
from scaffoldkit.template.engine import (
    EngineConfig,
    TemplateEngine,
    TemplateRenderError,
    camel_case,
    kebab_case,
    pascal_case,
    upper_case,
)
from scaffoldkit.template.loader import (
    BINARY_EXTENSIONS,
    DiscoveredTemplate,
    LoadedTemplate,
    LoadFailure,
    TemplateFile,
    TemplateLoadError,
    is_binary_file,
    list_builtin_templates,
    load_template,
)
from scaffoldkit.template.variables import (
    CrossReference,
    collect_template_sources,
    cross_reference,
    extract_variables,
)

__all__ = [
    "BINARY_EXTENSIONS",
    "ContextValue",
    "CrossReference",
    "DiscoveredTemplate",
    "EngineConfig",
    "LoadFailure",
    "LoadedTemplate",
    "TemplateContext",
    "TemplateEngine",
    "TemplateFile",
    "TemplateLoadError",
    "TemplateRenderError",
    "camel_case",
    "collect_template_sources",
    "cross_reference",
    "extract_variables",
    "is_binary_file",
    "kebab_case",
    "list_builtin_templates",
    "load_template",
    "pascal_case",
    "upper_case",
]
