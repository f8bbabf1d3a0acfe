"""Tests for the Jinja2 template renderer.

Covers:
- Rendering the packaged manifest templates
- The to_json filter
- StrictUndefined behaviour
- Rendering from a custom template directory
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from jinja2 import UndefinedError

from libgen.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def custom(tmp_path: Path) -> TemplateRenderer:
    (tmp_path / "value.j2").write_text("{{ value | to_json }}", encoding="utf-8")
    (tmp_path / "hello.txt.j2").write_text("Hello {{ name }}!\n", encoding="utf-8")
    return TemplateRenderer(tmp_path)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRendering:
    def test_custom_directory(self, custom):
        assert custom.render("hello.txt.j2", {"name": "libgen"}) == "Hello libgen!\n"

    def test_packaged_project_json(self, renderer):
        out = renderer.render(
            "project.json.j2",
            {
                "project_name": "infra-cache",
                "offset_from_root": "../../../",
                "source_root": "libs/infra/cache/src",
                "tags": ["type:infra"],
                "targets": {},
            },
        )
        project = json.loads(out)
        assert project["name"] == "infra-cache"
        assert project["tags"] == ["type:infra"]
        assert project["$schema"] == "../../../node_modules/nx/schemas/project-schema.json"


class TestToJsonFilter:
    def test_round_trips(self, custom):
        out = custom.render("value.j2", {"value": {"a": [1, "b"]}})
        assert json.loads(out) == {"a": [1, "b"]}

    def test_is_not_escaped(self, custom):
        assert custom.render("value.j2", {"value": "<a & b>"}) == '"<a & b>"'


class TestStrictUndefined:
    def test_missing_variable_raises(self, custom):
        with pytest.raises(UndefinedError):
            custom.render("hello.txt.j2", {})

    def test_missing_template_context_raises(self, renderer):
        with pytest.raises(UndefinedError):
            renderer.render("tsconfig.json.j2", {})
