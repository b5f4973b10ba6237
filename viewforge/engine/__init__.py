"""View engine: template store, compiler, cache and change watcher.

Submodules are imported directly (``viewforge.engine.compiler`` and so on)
because the handler interfaces depend on ``viewforge.engine.models``.
"""
