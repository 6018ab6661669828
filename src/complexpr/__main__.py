"""Allow ``python -m complexpr``."""

from complexpr.cli import app

if __name__ == "__main__":
    app()
