"""Tests for @include resolution."""

import asyncio

import pytest

from assetpipe.exceptions import TransformError
from assetpipe.task import Status
from assetpipe.taskgen import OutputDir, Sources
from assetpipe.transforms.markup import make_markup_task, render_markup


class TestRenderMarkup:
    """Tests for render_markup()."""

    def test_no_includes(self, tmp_path):
        page = tmp_path / "index.html"
        page.write_text("<p>plain</p>")
        assert render_markup(page) == "<p>plain</p>"

    def test_nested_includes_relative_to_includer(self, tmp_path):
        (tmp_path / "components" / "nav").mkdir(parents=True)
        (tmp_path / "components" / "header.html").write_text(
            '<header>@include("nav/menu.html")</header>')
        (tmp_path / "components" / "nav" / "menu.html").write_text("<nav/>")
        page = tmp_path / "index.html"
        page.write_text("@include('components/header.html')<main/>")

        assert render_markup(page) == "<header><nav/></header><main/>"

    def test_same_include_twice(self, tmp_path):
        (tmp_path / "hr.html").write_text("<hr>")
        page = tmp_path / "index.html"
        page.write_text("@include('hr.html')|@include( 'hr.html' )")
        assert render_markup(page) == "<hr>|<hr>"

    def test_cycle(self, tmp_path):
        (tmp_path / "a.html").write_text("@include('b.html')")
        (tmp_path / "b.html").write_text("@include('a.html')")
        with pytest.raises(TransformError, match="include cycle: a.html -> b.html -> a.html"):
            render_markup(tmp_path / "a.html")

    def test_missing_include(self, tmp_path):
        page = tmp_path / "index.html"
        page.write_text("@include('missing.html')")
        with pytest.raises(TransformError, match="index.html: included file"):
            render_markup(page)


class TestMarkupTask:
    """Tests for the html task."""

    def test_pages_keep_structure(self, project):
        sources = Sources(["src/*.html", "src/pages/**/*.html"], base_path=project)
        task = make_markup_task(sources, OutputDir(project / "build"))

        result = asyncio.run(task.execute())

        assert result.status is Status.SUCCESS
        assert (project / "build" / "index.html").read_text() == \
            "<body><header>Site</header></body>"
        assert (project / "build" / "blog" / "post.html").read_text() == "<p>post</p>"
        assert not (project / "build" / "components").exists()

    def test_cycle_fails_task(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "index.html").write_text("@include('index.html')")
        task = make_markup_task(Sources("src/*.html", base_path=tmp_path),
                                OutputDir(tmp_path / "build"))

        result = asyncio.run(task.execute())

        assert result.status is Status.FAILURE
        assert "include cycle" in result.reason
