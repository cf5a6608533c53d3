"""Allow ``python -m filebrowser``."""

from filebrowser.cli import app

if __name__ == "__main__":
    app()
