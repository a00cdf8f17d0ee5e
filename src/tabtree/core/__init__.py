"""
Pipeline orchestration, run options, errors and diagnostics.

Submodules are imported directly (``tabtree.core.pipeline`` etc.) to keep
this package free of import cycles.
"""
