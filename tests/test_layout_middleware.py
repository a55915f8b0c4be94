"""Tests for the layout_middleware module."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from starlette.responses import Response, StreamingResponse

from layoutware.src.core.exceptions.exceptions import LayoutConfigurationException
from layoutware.src.core.layout import Layout
from layoutware.src.core.predicates import ignore_when_query_param
from layoutware.src.core.responses import LayoutResponse
from layoutware.src.middleware.layout_middleware import LayoutMiddleware, default_layout_dirs

LAYOUTS_DIR = Path(__file__).parent / "layouts"
ALT_LAYOUTS_DIR = Path(__file__).parent / "alt_layouts"


def make_request(path="/"):
    return Request(
        {"type": "http", "method": "GET", "path": path, "query_string": b"", "headers": []}
    )


class TestLayoutMiddlewareConfiguration:
    """Test cases for LayoutMiddleware configuration."""

    def test_layout_dirs(self):
        """Test defining the directories used to find templates."""
        middleware = LayoutMiddleware(app=None, layout_dirs=[LAYOUTS_DIR, ALT_LAYOUTS_DIR])

        assert middleware.layout_dirs == [LAYOUTS_DIR, ALT_LAYOUTS_DIR]

    def test_layout_dirs_accepts_single_path(self):
        """Test setting a single layout directory."""
        middleware = LayoutMiddleware(app=None, layout_dirs=[ALT_LAYOUTS_DIR])

        middleware.layout_dirs = str(LAYOUTS_DIR)

        assert middleware.layout_dirs == [LAYOUTS_DIR]

    def test_default_layout_dirs(self, tmp_path, monkeypatch):
        """Test the conventional directories under the working directory."""
        monkeypatch.chdir(tmp_path)

        middleware = LayoutMiddleware(app=None)

        assert middleware.layout_dirs == [
            tmp_path / "layouts",
            tmp_path / "views" / "layouts",
            tmp_path / "app" / "views" / "layouts",
        ]
        assert default_layout_dirs() == middleware.layout_dirs

    def test_defaults(self):
        """Test the default template name, format and master flag."""
        middleware = LayoutMiddleware(app=None, layout_dirs=[LAYOUTS_DIR])

        assert middleware.default_template == "application"
        assert middleware.default_format == "html"
        assert middleware.is_master is False
        assert middleware.should_ignore_layout(make_request()) is False

    def test_custom_defaults(self):
        """Test setting a default template and format."""
        middleware = LayoutMiddleware(
            app=None, layout_dirs=[LAYOUTS_DIR], default_template="my_template", default_format="json"
        )

        assert middleware.default_template == "my_template"
        assert middleware.default_format == "json"

    def test_empty_template_name_rejected(self):
        """Test that an empty default template is a configuration error."""
        with pytest.raises(LayoutConfigurationException) as exc_info:
            LayoutMiddleware(app=None, layout_dirs=[LAYOUTS_DIR], default_template="")

        assert exc_info.value.error_code == "E_101"

    def test_empty_format_rejected(self):
        """Test that an empty default format is a configuration error."""
        with pytest.raises(LayoutConfigurationException):
            LayoutMiddleware(app=None, layout_dirs=[LAYOUTS_DIR], default_format="")

    def test_ignore_layout_predicate(self):
        """Test a configured ignore predicate."""
        middleware = LayoutMiddleware(
            app=None, layout_dirs=[LAYOUTS_DIR], ignore_layout=lambda request: True
        )

        assert middleware.should_ignore_layout(make_request()) is True


class TestLayoutMiddlewareTemplates:
    """Test cases for template resolution through the middleware."""

    def setup_method(self):
        """Set up test method."""
        self.middleware = LayoutMiddleware(app=None, layout_dirs=[LAYOUTS_DIR])

    def test_resolve_template_default_format(self):
        """Test that the format defaults to the middleware default."""
        template = self.middleware.resolve_template("first")

        assert template.path.name == "first.html.j2"

    def test_resolve_template_missing(self):
        """Test that a missing template resolves to None."""
        assert self.middleware.resolve_template("not_a_real_template") is None
        assert self.middleware.resolve_template("first", "no_real_format") is None

    def test_resolve_template_is_cached(self):
        """Test that resolving twice returns the same compiled template."""
        first = self.middleware.resolve_template("wrapper", "html")
        second = self.middleware.resolve_template("wrapper", "html")

        assert first is second

    def test_changing_layout_dirs_resets_cache(self):
        """Test that new directories get a new cache."""
        first = self.middleware.resolve_template("first", "html")

        self.middleware.layout_dirs = [ALT_LAYOUTS_DIR]

        second = self.middleware.resolve_template("first", "html")
        assert second is not first
        assert "First (Alternative)" in second.render()


class TestLayoutMiddlewareDispatch:
    """Test cases for LayoutMiddleware.dispatch."""

    def setup_method(self):
        """Set up test method."""
        self.middleware = LayoutMiddleware(
            app=None, layout_dirs=[LAYOUTS_DIR], default_template="wrapper"
        )

    @pytest.mark.asyncio
    async def test_dispatch_attaches_layout(self):
        """Test that a Layout is attached for downstream handlers."""
        request = make_request()
        seen = {}

        async def call_next(req):
            seen["layout"] = req.state.layout
            return Response("ok")

        await self.middleware.dispatch(request, call_next)

        assert isinstance(seen["layout"], Layout)
        assert seen["layout"].middleware is self.middleware
        assert seen["layout"].request is request

    @pytest.mark.asyncio
    async def test_dispatch_ensures_request_variables(self):
        """Test that request variables are available after dispatch."""
        request = make_request()

        await self.middleware.dispatch(request, AsyncMock(return_value=Response("ok")))

        assert request.state.variables == {}

    @pytest.mark.asyncio
    async def test_dispatch_keeps_existing_request_variables(self):
        """Test that upstream request variables are kept."""
        request = make_request()
        request.state.variables = {"title": "Upstream"}

        await self.middleware.dispatch(request, AsyncMock(return_value=Response("ok")))

        assert request.state.variables == {"title": "Upstream"}

    @pytest.mark.asyncio
    async def test_dispatch_removes_layout_afterwards(self):
        """Test that a request without a previous layout has none afterwards."""
        request = make_request()

        await self.middleware.dispatch(request, AsyncMock(return_value=Response("ok")))

        assert getattr(request.state, "layout", None) is None

    @pytest.mark.asyncio
    async def test_dispatch_restores_previous_layout(self):
        """Test that a non-master outer layout is restored after the inner call."""
        request = make_request()
        outer = LayoutMiddleware(app=None, layout_dirs=[LAYOUTS_DIR])
        outer_layout = Layout(outer, request)
        request.state.layout = outer_layout
        seen = {}

        async def call_next(req):
            seen["layout"] = req.state.layout
            return Response("ok")

        await self.middleware.dispatch(request, call_next)

        assert seen["layout"] is not outer_layout
        assert seen["layout"].middleware is self.middleware
        assert request.state.layout is outer_layout

    @pytest.mark.asyncio
    async def test_dispatch_restores_layout_on_error(self):
        """Test that the previous layout is restored when downstream raises."""
        request = make_request()
        outer_layout = Layout(LayoutMiddleware(app=None, layout_dirs=[LAYOUTS_DIR]), request)
        request.state.layout = outer_layout

        with pytest.raises(ValueError):
            await self.middleware.dispatch(request, AsyncMock(side_effect=ValueError("boom")))

        assert request.state.layout is outer_layout

    @pytest.mark.asyncio
    async def test_dispatch_master_is_not_replaced(self):
        """Test that an upstream master layout passes through untouched."""
        request = make_request()
        master = LayoutMiddleware(app=None, layout_dirs=[LAYOUTS_DIR], master=True)
        master_layout = Layout(master, request)
        request.state.layout = master_layout
        seen = {}

        async def call_next(req):
            seen["layout"] = req.state.layout
            return Response("ok")

        await self.middleware.dispatch(request, call_next)

        assert seen["layout"] is master_layout
        assert request.state.layout is master_layout
        assert request.state.layout.middleware is master

    @pytest.mark.asyncio
    async def test_master_chain(self):
        """Test a master middleware wrapping a second middleware."""
        master = LayoutMiddleware(
            app=None, layout_dirs=[LAYOUTS_DIR], default_template="wrapper", master=True
        )
        inner = LayoutMiddleware(
            app=None, layout_dirs=[LAYOUTS_DIR], default_template="wrapper", default_format="jsonp"
        )
        request = make_request()
        seen = {}

        async def handler(req):
            seen["layout"] = req.state.layout
            req.state.layout.content = "ok"
            return LayoutResponse(req.state.layout)

        async def call_inner(req):
            return await inner.dispatch(req, handler)

        response = await master.dispatch(request, call_inner)

        assert seen["layout"].middleware is master
        assert b"{ content" not in response.body
        assert b"<h1>Wrapper Template</h1>" in response.body


def build_app(*middleware_options):
    """Build an app with one LayoutMiddleware per options dict, outermost first."""
    app = FastAPI()
    seen = []

    @app.get("/")
    async def index(request: Request):
        layout = request.state.layout
        seen.append(layout)
        layout.content = "ok"
        return LayoutResponse(layout)

    @app.get("/stream")
    async def stream(request: Request):
        layout = request.state.layout
        layout.content = "streamed"
        return StreamingResponse(layout, media_type="text/html")

    @app.get("/regions")
    async def regions(request: Request):
        layout = request.state.layout
        layout.template_name = "multi"
        layout.set_content("Main Content")
        layout.set_content("Foo Content", label="foo")
        return LayoutResponse(layout)

    @app.get("/partial")
    async def partial(request: Request):
        layout = request.state.layout
        layout.ignore_layout()
        layout.content = "partial"
        return LayoutResponse(layout)

    for options in reversed(middleware_options):
        app.add_middleware(LayoutMiddleware, **options)
    return app, seen


class TestLayoutMiddlewareIntegration:
    """Integration tests for LayoutMiddleware."""

    def test_wraps_response(self):
        """Test that the handler content is wrapped in the default layout."""
        app, _ = build_app({"layout_dirs": [LAYOUTS_DIR], "default_template": "wrapper"})

        with TestClient(app) as client:
            response = client.get("/")

        assert response.status_code == 200
        assert "<h1>Wrapper Template</h1>" in response.text
        assert "ok" in response.text
        assert response.headers["content-type"].startswith("text/html")

    def test_format_from_middleware(self):
        """Test that the middleware default format selects the template."""
        app, _ = build_app(
            {"layout_dirs": [LAYOUTS_DIR], "default_template": "wrapper", "default_format": "jsonp"}
        )

        with TestClient(app) as client:
            response = client.get("/")

        assert "{ content: 'ok' }" in response.text
        assert response.headers["content-type"].startswith("application/javascript")

    def test_streaming_layout_body(self):
        """Test returning the layout itself as a streamed body."""
        app, _ = build_app({"layout_dirs": [LAYOUTS_DIR], "default_template": "wrapper"})

        with TestClient(app) as client:
            response = client.get("/stream")

        assert "<h1>Wrapper Template</h1>" in response.text
        assert "streamed" in response.text

    def test_multiple_regions(self):
        """Test rendering several content regions."""
        app, _ = build_app({"layout_dirs": [LAYOUTS_DIR], "default_template": "wrapper"})

        with TestClient(app) as client:
            response = client.get("/regions")

        assert '<div class="main">Main Content</div>' in response.text
        assert '<div class="foo">Foo Content</div>' in response.text

    def test_missing_template_returns_content(self):
        """Test that content is returned bare when no template exists."""
        app, _ = build_app({"layout_dirs": [LAYOUTS_DIR], "default_template": "missing"})

        with TestClient(app) as client:
            response = client.get("/")

        assert response.text == "ok"

    def test_ignore_layout_query_param(self):
        """Test suppressing the layout from the client side."""
        app, _ = build_app(
            {
                "layout_dirs": [LAYOUTS_DIR],
                "default_template": "wrapper",
                "ignore_layout": ignore_when_query_param("apply_layout"),
            }
        )

        with TestClient(app) as client:
            bare = client.get("/", params={"apply_layout": "false"})
            wrapped = client.get("/")

        assert bare.text == "ok"
        assert "<h1>Wrapper Template</h1>" in wrapped.text

    def test_ignore_layout_from_handler(self):
        """Test suppressing the layout from inside a handler."""
        app, _ = build_app({"layout_dirs": [LAYOUTS_DIR], "default_template": "wrapper"})

        with TestClient(app) as client:
            response = client.get("/partial")

        assert response.text == "partial"

    def test_master_takes_precedence(self):
        """Test that a downstream middleware doesn't replace a master layout."""
        app, seen = build_app(
            {"layout_dirs": [LAYOUTS_DIR], "default_template": "wrapper", "master": True},
            {"layout_dirs": [LAYOUTS_DIR], "default_template": "wrapper", "default_format": "jsonp"},
        )

        with TestClient(app) as client:
            response = client.get("/")

        assert "{ content" not in response.text
        assert "<h1>Wrapper Template</h1>" in response.text
        assert seen[0].is_master is True
        assert seen[0].middleware.default_format == "html"

    def test_downstream_wins_without_master(self):
        """Test that the innermost middleware's layout is used without a master."""
        app, seen = build_app(
            {"layout_dirs": [LAYOUTS_DIR], "default_template": "wrapper"},
            {"layout_dirs": [LAYOUTS_DIR], "default_template": "wrapper", "default_format": "jsonp"},
        )

        with TestClient(app) as client:
            response = client.get("/")

        assert "{ content: 'ok' }" in response.text
        assert seen[0].is_master is False
        assert seen[0].middleware.default_format == "jsonp"
