"""Unit tests for view cache persistence."""

import json

import pytest

from tests.conftest import write_template
from viewforge.core.exceptions import CacheCorruptError
from viewforge.engine.cache import (
    deserialize_cache,
    read_cache_file,
    registry_from_cache,
    serialize_cache,
    write_cache_file,
)


class TestViewCache:
    """Test suite for cache serialization and file access."""

    # =========================================================================
    # Serialization Tests
    # =========================================================================

    def test_round_trip_preserves_registry(self, engine):
        """Test that a restored registry holds the same templates, views and graph."""
        snapshot = engine.compiler.registry.snapshot

        restored = registry_from_cache(deserialize_cache(serialize_cache(snapshot))).snapshot

        assert dict(restored.templates) == dict(snapshot.templates)
        assert dict(restored.compiled) == dict(snapshot.compiled)
        assert {k: set(v) for k, v in restored.dependencies.items()} == {
            k: set(v) for k, v in snapshot.dependencies.items()
        }

    def test_serialization_is_stable(self, engine):
        snapshot = engine.compiler.registry.snapshot

        assert serialize_cache(snapshot) == serialize_cache(snapshot)

    def test_document_layout(self, engine):
        document = json.loads(serialize_cache(engine.compiler.registry.snapshot))

        assert set(document) == {"templates", "compiled_views", "dependencies"}
        names = [t["logical_name"] for t in document["templates"]]
        assert names == sorted(names)

    @pytest.mark.parametrize("text", ["not json", '{"templates": 5}', "[]"])
    def test_corrupt_text_raises(self, text):
        with pytest.raises(CacheCorruptError):
            deserialize_cache(text)

    # =========================================================================
    # File Tests
    # =========================================================================

    def test_read_missing_file(self, tmp_path):
        assert read_cache_file(tmp_path / "absent.json") is None

    def test_write_creates_directory(self, tmp_path):
        path = tmp_path / "Views" / "Cache" / "viewsCache.json"

        assert write_cache_file(path, "{}") is True
        assert read_cache_file(path) == "{}"

    def test_write_failure_reported(self, tmp_path):
        """Test that a write blocked by a file in place of the directory returns False."""
        blocker = tmp_path / "Cache"
        blocker.write_text("not a directory", encoding="utf-8")

        assert write_cache_file(blocker / "viewsCache.json", "{}") is False

    # =========================================================================
    # Privacy Tests
    # =========================================================================

    def test_rendered_pages_not_persisted(self, engine, views_dir, token_registry):
        """Test that a rendered page and its anti-forgery token never reach the cache."""
        path = write_template(views_dir, "App/Form", "<form>%%AntiForgeryToken%%</form>")
        assert engine.watcher.handle_change(path) is True

        page = engine.render_view("App/Form", {"secret": "s3cr3t"})
        token = page[len("<form>"):-len("</form>")]
        cache_text = engine.get_cache()

        assert token in token_registry
        assert token not in cache_text
        assert "last_render_result" not in cache_text
