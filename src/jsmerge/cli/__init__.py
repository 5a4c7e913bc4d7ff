"""jsmerge CLI layer.

``cli`` and ``main`` are resolved on first access. ``import jsmerge`` then
stays free of click, and ``python -m jsmerge.cli.main`` does not find its
own module already imported.
"""

__all__ = ["cli", "main"]


def __getattr__(name):
    if name == "cli":
        from .main import cli

        return cli
    if name == "main":
        from .main import main

        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
