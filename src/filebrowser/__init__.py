"""filebrowser - browse and manage a confined directory tree over HTTP."""

__version__ = "0.1.0"
