"""scaffoldkit scaffolder -- materialises templates into project directories.

Quick usage::

    from scaffoldkit.scaffolder import HookRunner, Scaffolder
    from scaffoldkit.template import TemplateContext, TemplateEngine, load_template

    template = load_template("templates/cli")
    scaffolder = Scaffolder(TemplateEngine())
    result = await scaffolder.scaffold(
        template, TemplateContext({"projectName": "demo"}), "./demo"
    )
    await HookRunner().run(template.manifest.post_hooks, result.output_dir)
"""

from scaffoldkit.scaffolder.generator import (
    ScaffoldError,
    ScaffoldResult,
    ScaffoldedFile,
    Scaffolder,
)
from scaffoldkit.scaffolder.hooks import (
    HookExecutionError,
    HookResult,
    HookRunner,
    all_succeeded,
)

__all__ = [
    "HookExecutionError",
    "HookResult",
    "HookRunner",
    "ScaffoldError",
    "ScaffoldResult",
    "ScaffoldedFile",
    "Scaffolder",
    "all_succeeded",
]
