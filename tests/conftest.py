"""Shared fixtures: a small view tree and engine components built on it."""

from pathlib import Path

import pytest

from viewforge.core.tokens import TokenRegistry
from viewforge.engine.view_engine import ViewEngine
from viewforge.strategies.directives import (
    BundleDirective,
    MasterPageDirective,
    PartialPageDirective,
    PlaceholderDirective,
)
from viewforge.strategies.substitutions import (
    AntiForgeryTokenSubstitution,
    CommentSubstitution,
    HeadSubstitution,
)

LAYOUT = """<html>
<head>
%%Head%%
</head>
<body>
%%View%%
</body>
</html>
"""

NAV = "<nav>menu</nav>\n"

INDEX = """%%Master=Layout%%
[[
    <title>Index</title>
]]
<h1>{{title}}</h1>
%%Partial=Nav%%
@@ hidden comment @@
<p>{|body|}</p>
"""

ABOUT = "<p>About {{name}}</p>\n"

USER_FRAGMENT = "%%Partial=Nav%%\n\n<li>{{item}}</li>\n"

COMPILED_INDEX = """<html>
<head>
<title>Index</title>
</head>
<body>
<h1>{{title}}</h1>
<nav>menu</nav>
<p>{|body|}</p>
</body>
</html>
"""

BUNDLES = {"site": ["site.css", "app.js"]}


def write_template(root: Path, logical_name: str, content: str) -> Path:
    """Write a template file under root and return its path."""
    path = root / f"{logical_name}.html"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def views_dir(tmp_path: Path) -> Path:
    """A view root with a layout, a partial, two pages and a fragment."""
    root = tmp_path / "Views"
    write_template(root, "Shared/Layout", LAYOUT)
    write_template(root, "Shared/Nav", NAV)
    write_template(root, "App/Index", INDEX)
    write_template(root, "App/About", ABOUT)
    write_template(root, "App/UserFragment", USER_FRAGMENT)
    return root


@pytest.fixture
def token_registry() -> TokenRegistry:
    return TokenRegistry()


@pytest.fixture
def directive_handlers():
    return [
        MasterPageDirective(),
        PlaceholderDirective(),
        PartialPageDirective(),
        BundleDirective(
            debug_mode=True,
            shared_resource_path="/Resources",
            get_bundle_files=BUNDLES.get,
        ),
    ]


@pytest.fixture
def substitution_handlers(token_registry):
    return [
        CommentSubstitution(),
        AntiForgeryTokenSubstitution(token_registry.create_token),
        HeadSubstitution(),
    ]


@pytest.fixture
def engine(views_dir, directive_handlers, substitution_handlers) -> ViewEngine:
    """An engine booted by scanning views_dir, with a fast reload poll."""
    return ViewEngine(
        view_roots=[views_dir],
        directive_handlers=directive_handlers,
        substitution_handlers=substitution_handlers,
        reload_max_attempts=2,
        reload_poll_interval=0.0,
    )
