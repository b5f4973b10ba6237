"""Unit tests for ChangeWatcher."""

import json

from tests.conftest import ABOUT, write_template
from viewforge.engine.models import fingerprint
from viewforge.engine.view_engine import ViewEngine


class TestChangeWatcher:
    """Test suite for reloading changed templates."""

    # =========================================================================
    # Reload Tests
    # =========================================================================

    def test_partial_change_recompiles_dependents(self, engine, views_dir):
        """Test that changing a partial rebuilds the pages that include it and nothing else."""
        about_before = engine.compiled_views["App/About"]
        path = write_template(views_dir, "Shared/Nav", "<nav>new menu</nav>\n")

        assert engine.watcher.handle_change(path) is True

        assert "<nav>new menu</nav>" in engine.compiled_views["App/Index"].compiled_content
        assert engine.compiled_views["App/About"] is about_before
        nav = engine.compiled_views["Shared/Nav"]
        assert nav.raw_content == "<nav>new menu</nav>\n"
        assert nav.content_fingerprint == fingerprint("<nav>new menu</nav>\n")

    def test_page_change_recompiles_page(self, engine, views_dir):
        path = write_template(views_dir, "App/About", "<p>About us {{name}}</p>\n")

        assert engine.watcher.handle_change(path) is True

        assert engine.render_view("App/About", {"name": "Ada"}) == "<p>About us Ada</p>\n"
        assert engine.templates["App/About"].raw_content == "<p>About us {{name}}</p>\n"

    def test_new_template_is_compiled(self, engine, views_dir):
        path = write_template(views_dir, "App/Contact", "%%Partial=Nav%%<p>contact</p>\n")

        assert engine.watcher.handle_change(path) is True

        assert engine.compiled_views["App/Contact"].compiled_content == (
            "<nav>menu</nav>\n<p>contact</p>\n"
        )
        assert engine.dependencies["App/Contact"] == ("Shared/Nav",)

    def test_fragment_change_kept_verbatim(self, engine, views_dir):
        content = "<li>{{item}}</li>\n\n<li>more</li>\n"
        path = write_template(views_dir, "App/UserFragment", content)

        assert engine.watcher.handle_change(path) is True

        assert engine.compiled_views["App/UserFragment"].compiled_content == content

    def test_unchanged_content_recompiles_view(self, engine, views_dir):
        """Test that a touch without a content change still yields a fresh compile."""
        before = engine.compiled_views["App/About"]

        assert engine.watcher.handle_change(views_dir / "App" / "About.html") is True

        after = engine.compiled_views["App/About"]
        assert after is not before
        assert after.compiled_content == ABOUT

    # =========================================================================
    # Failure Tests
    # =========================================================================

    def test_unreadable_file_gives_up(self, engine, views_dir, monkeypatch):
        """Test that a file that never becomes readable leaves the registry alone."""
        monkeypatch.setattr("viewforge.engine.watcher.can_open_for_read", lambda path: False)
        path = write_template(views_dir, "App/About", "<p>locked</p>\n")

        assert engine.watcher.handle_change(path) is False

        assert engine.templates["App/About"].raw_content == ABOUT
        assert engine.watcher.enabled is True

    def test_failed_compile_rolls_back(self, engine, views_dir):
        """Test that a broken edit keeps serving the previous compiled view."""
        before = engine.compiled_views["App/About"]
        path = write_template(views_dir, "App/About", "%%Master=Gone%%<p/>\n")

        assert engine.watcher.handle_change(path) is False

        assert engine.compiled_views["App/About"] is before
        assert engine.templates["App/About"].raw_content == ABOUT
        assert engine.watcher.enabled is True

    def test_disabled_watcher_drops_events(self, engine, views_dir):
        path = write_template(views_dir, "App/About", "<p>ignored</p>\n")
        engine.watcher._enabled.clear()

        assert engine.watcher.handle_change(path) is False
        assert engine.templates["App/About"].raw_content == ABOUT

    # =========================================================================
    # Notification Tests
    # =========================================================================

    def test_reload_rewrites_persisted_cache(self, engine, views_dir, tmp_path):
        cache_path = tmp_path / "Cache" / "viewsCache.json"
        engine.persist_cache(cache_path)
        path = write_template(views_dir, "App/About", "<p>cached</p>\n")

        assert engine.watcher.handle_change(path) is True

        document = json.loads(cache_path.read_text(encoding="utf-8"))
        about = next(t for t in document["templates"] if t["logical_name"] == "App/About")
        assert about["raw_content"] == "<p>cached</p>\n"
        assert engine.cache_updated is True

    def test_reload_marks_cache_updated(self, engine, views_dir):
        engine.get_cache()
        assert engine.cache_updated is False

        engine.watcher.handle_change(write_template(views_dir, "App/About", "<p>x</p>\n"))

        assert engine.cache_updated is True

    # =========================================================================
    # Observer Tests
    # =========================================================================

    def test_start_and_stop(self, engine):
        engine.start_watching()
        try:
            assert engine.watcher.is_running
        finally:
            engine.stop_watching()

        assert not engine.watcher.is_running

    # =========================================================================
    # Pending View Tests
    # =========================================================================

    def test_missing_layout_added_later(
        self, views_dir, directive_handlers, substitution_handlers
    ):
        """Test that a page which failed on a missing layout compiles once the layout appears."""
        write_template(views_dir, "App/Orphan", "%%Master=Site%%<p>orphan</p>\n")
        engine = ViewEngine(
            view_roots=[views_dir],
            directive_handlers=directive_handlers,
            substitution_handlers=substitution_handlers,
            reload_max_attempts=1,
            reload_poll_interval=0.0,
        )
        assert engine.render_view("App/Orphan") is None

        path = write_template(views_dir, "Shared/Site", "<main>%%View%%</main>\n")

        assert engine.watcher.handle_change(path) is True
        assert engine.render_view("App/Orphan") == "<main><p>orphan</p>\n</main>\n"
        assert engine.dependencies["App/Orphan"] == ("Shared/Site",)
        assert engine.compiler.pending_views() == []

    def test_unrelated_reload_keeps_page_pending(
        self, views_dir, directive_handlers, substitution_handlers
    ):
        write_template(views_dir, "App/Orphan", "%%Master=Site%%<p>orphan</p>\n")
        engine = ViewEngine(
            view_roots=[views_dir],
            directive_handlers=directive_handlers,
            substitution_handlers=substitution_handlers,
            reload_max_attempts=1,
            reload_poll_interval=0.0,
        )

        path = write_template(views_dir, "App/About", "<p>changed</p>\n")

        assert engine.watcher.handle_change(path) is True
        assert engine.compiler.pending_views() == ["App/Orphan"]
        assert engine.render_view("App/About") == "<p>changed</p>\n"
