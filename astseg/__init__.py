"""astseg — clang AST to segmented IR pipeline."""

__version__ = "0.1.0"
