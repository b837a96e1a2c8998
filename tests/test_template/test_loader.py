"""Tests for template loading and discovery (scaffoldkit.template.loader).

Covers:
- Layout checks and their failure reasons
- File enumeration order and classification
- Binary detection
- Discovery of built-in templates
"""

from __future__ import annotations

from pathlib import Path, PurePath

import pytest

from scaffoldkit.manifest import ManifestValidationError
from scaffoldkit.template import (
    LoadFailure,
    TemplateLoadError,
    is_binary_file,
    list_builtin_templates,
    load_template,
)
from scaffoldkit.template.loader import is_template_file

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassification:
    @pytest.mark.parametrize(
        "name", ["logo.png", "photo.JPG", "font.woff2", "bundle.tar", "doc.pdf", "icon.svg"]
    )
    def test_binary_extensions(self, name: str):
        assert is_binary_file(name)

    @pytest.mark.parametrize("name", ["README.md", "main.py.hbs", "Makefile", "data.json"])
    def test_text_files(self, name: str):
        assert not is_binary_file(name)

    def test_template_marker_does_not_hide_binary(self):
        assert is_binary_file("logo.png.hbs")
        assert is_binary_file(PurePath("assets", "logo.png.hbs"))

    def test_is_template_file(self):
        assert is_template_file("README.md.hbs")
        assert is_template_file(Path("a") / "b.hbs")
        assert not is_template_file("README.md")
        assert not is_template_file("hbs")


# ---------------------------------------------------------------------------
# load_template
# ---------------------------------------------------------------------------

class TestLoadTemplate:
    def test_loads_manifest_and_files(self, make_template):
        root = make_template({
            "README.md.hbs": "# {{projectName}}",
            "src/main.py": "print('hi')\n",
            "src/{{projectName}}/__init__.py.hbs": "",
        })

        template = load_template(root)

        assert template.manifest.name == "api"
        assert template.base_path == root / "files"
        paths = [f.relative_path.as_posix() for f in template.files]
        assert paths == ["README.md.hbs", "src/main.py", "src/{{projectName}}/__init__.py.hbs"]

    def test_files_are_classified(self, make_template):
        root = make_template({"a.txt.hbs": "x", "b.txt": "y"})
        by_name = {f.relative_path.name: f for f in load_template(root).files}
        assert by_name["a.txt.hbs"].is_template is True
        assert by_name["b.txt"].is_template is False
        assert by_name["b.txt"].absolute_path == root / "files" / "b.txt"

    def test_walk_is_depth_first_and_sorted(self, make_template):
        root = make_template({
            "z.txt": "",
            "a/inner.txt": "",
            "a/b/deep.txt": "",
            "m.txt": "",
        })
        paths = [f.relative_path.as_posix() for f in load_template(root).files]
        assert paths == ["a/b/deep.txt", "a/inner.txt", "m.txt", "z.txt"]

    def test_loading_twice_gives_same_order(self, make_template):
        root = make_template({"b.txt": "", "a.txt": "", "c/d.txt": ""})
        assert load_template(root).files == load_template(root).files

    def test_empty_directories_are_not_listed(self, make_template):
        root = make_template({"keep.txt": ""})
        (root / "files" / "empty" / "nested").mkdir(parents=True)
        assert [f.relative_path.as_posix() for f in load_template(root).files] == ["keep.txt"]

    def test_dotfiles_are_included(self, make_template):
        root = make_template({".gitignore": "node_modules/\n"})
        assert [f.relative_path.as_posix() for f in load_template(root).files] == [".gitignore"]

    def test_accepts_string_path(self, make_template):
        root = make_template({"a.txt": ""})
        assert len(load_template(str(root)).files) == 1

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(TemplateLoadError) as exc_info:
            load_template(tmp_path / "nope")
        assert exc_info.value.reason is LoadFailure.NOT_A_DIRECTORY
        assert "Template directory does not exist" in str(exc_info.value)

    def test_path_is_a_file(self, tmp_path: Path):
        target = tmp_path / "file.txt"
        target.write_text("x", encoding="utf-8")
        with pytest.raises(TemplateLoadError) as exc_info:
            load_template(target)
        assert exc_info.value.reason is LoadFailure.NOT_A_DIRECTORY

    def test_missing_manifest(self, make_template):
        root = make_template({"a.txt": "x"}, manifest=None)
        with pytest.raises(TemplateLoadError) as exc_info:
            load_template(root)
        err = exc_info.value
        assert err.reason is LoadFailure.MISSING_MANIFEST
        assert err.path == root / "template.yaml"
        assert str(err) == f"Missing template.yaml in {root}"

    def test_missing_files_dir(self, make_template):
        root = make_template(with_files_dir=False)
        with pytest.raises(TemplateLoadError) as exc_info:
            load_template(root)
        assert exc_info.value.reason is LoadFailure.MISSING_FILES_DIR
        assert "Missing files/ directory" in str(exc_info.value)

    def test_invalid_manifest_propagates(self, make_template):
        root = make_template({"a.txt": ""}, manifest="name: x\n")
        with pytest.raises(ManifestValidationError):
            load_template(root)


# ---------------------------------------------------------------------------
# list_builtin_templates
# ---------------------------------------------------------------------------

class TestListBuiltinTemplates:
    def test_discovers_valid_templates_sorted(self, make_template, tmp_path: Path):
        make_template({"a.txt": ""}, name="templates/zeta")
        make_template({"a.txt": ""}, name="templates/alpha")

        discovered = list_builtin_templates(tmp_path / "templates")

        assert [t.name for t in discovered] == ["alpha", "zeta"]
        assert discovered[0].path == tmp_path / "templates" / "alpha"
        assert discovered[0].manifest.name == "api"

    def test_skips_invalid_entries(self, make_template, tmp_path: Path):
        make_template({"a.txt": ""}, name="templates/good")
        make_template({"a.txt": ""}, name="templates/no-manifest", manifest=None)
        make_template({"a.txt": ""}, name="templates/broken", manifest="name: [")
        (tmp_path / "templates" / "stray.txt").write_text("x", encoding="utf-8")

        assert [t.name for t in list_builtin_templates(tmp_path / "templates")] == ["good"]

    def test_missing_directory_yields_empty_list(self, tmp_path: Path):
        assert list_builtin_templates(tmp_path / "nowhere") == []

    def test_packaged_templates_are_valid(self):
        from scaffoldkit.config import BUILTIN_TEMPLATES_DIR

        names = [t.name for t in list_builtin_templates(BUILTIN_TEMPLATES_DIR)]
        assert names == ["api", "cli", "library"]
        for name in names:
            assert load_template(BUILTIN_TEMPLATES_DIR / name).files
