"""Unit tests for ViewRegistry."""

import threading

import pytest

from viewforge.engine.models import TemplateRecord
from viewforge.engine.registry import ViewRegistry


def record(logical_name: str, content: str = "<p/>") -> TemplateRecord:
    return TemplateRecord(logical_name=logical_name, display_name=logical_name, raw_content=content)


class TestViewRegistry:
    """Test suite for ViewRegistry transactions and snapshots."""

    @pytest.fixture
    def registry(self):
        return ViewRegistry(
            templates=[record("App/A"), record("Shared/Nav")],
            dependencies={"App/A": ["Shared/Nav", "Shared/Nav"]},
        )

    # =========================================================================
    # Snapshot Tests
    # =========================================================================

    def test_initial_snapshot(self, registry):
        snapshot = registry.snapshot

        assert set(snapshot.templates) == {"App/A", "Shared/Nav"}
        assert len(snapshot.compiled) == 0
        assert snapshot.dependencies["App/A"] == ("Shared/Nav",)

    def test_snapshot_is_read_only(self, registry):
        with pytest.raises(TypeError):
            registry.snapshot.templates["App/B"] = record("App/B")

    def test_readers_keep_old_snapshot(self, registry):
        """Test that a snapshot taken before a commit does not see the commit."""
        before = registry.snapshot

        with registry.write() as txn:
            txn.templates["App/B"] = record("App/B")

        assert "App/B" not in before.templates
        assert "App/B" in registry.snapshot.templates

    def test_uncommitted_changes_invisible(self, registry):
        with registry.write() as txn:
            txn.templates["App/B"] = record("App/B")
            assert "App/B" not in registry.snapshot.templates

    # =========================================================================
    # Transaction Tests
    # =========================================================================

    def test_exception_rolls_back(self, registry):
        """Test that a failing writer publishes nothing."""
        before = registry.snapshot

        with pytest.raises(RuntimeError):
            with registry.write() as txn:
                txn.templates["App/B"] = record("App/B")
                txn.reset_dependencies("App/A")
                raise RuntimeError("boom")

        assert registry.snapshot is before
        assert registry.snapshot.dependencies["App/A"] == ("Shared/Nav",)

    def test_nested_write_joins_outer_transaction(self, registry):
        with registry.write() as outer:
            with registry.write() as inner:
                assert inner is outer
                inner.templates["App/B"] = record("App/B")
            assert "App/B" not in registry.snapshot.templates

        assert "App/B" in registry.snapshot.templates

    def test_dependents_of(self, registry):
        with registry.write() as txn:
            txn.add_dependency("App/C", "Shared/Nav")
            assert txn.dependents_of("Shared/Nav") == ["App/A", "App/C"]
            assert txn.dependents_of("App/A") == []

    def test_writers_are_serialized(self, registry):
        """Test that concurrent writers never lose each other's updates."""

        def writer(index: int) -> None:
            for i in range(50):
                with registry.write() as txn:
                    txn.add_dependency("App/A", f"Shared/{index}-{i}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry.snapshot.dependencies["App/A"]) == 1 + 4 * 50
