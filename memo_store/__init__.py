"""Embedded persistence layer for a local, geo-tagged note-taking app."""

__version__ = "1.0.0"
