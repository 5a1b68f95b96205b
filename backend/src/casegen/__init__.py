"""casegen: AI-assisted test generation for GitHub repositories."""

__version__ = "0.1.0"
