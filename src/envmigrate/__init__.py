"""envmigrate: per-branch Contentful environments with versioned migrations."""

__version__ = "0.1.0"
