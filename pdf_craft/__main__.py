"""Allow ``python -m pdf_craft``."""

from pdf_craft.cli.commands import app

if __name__ == "__main__":
    app()
