"""
Repository — Manifest inspection and descriptor normalization.

This package holds the decision logic of a sync: whether the repository
is cloud-managed, which package descriptors need rewriting, and the
rewrite itself.
"""
