# filesearch/main.py
"""Main entry point for the filesearch CLI application."""

from filesearch.cli.interface import main_cli_group


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli_group(prog_name="filesearch")

if __name__ == '__main__':
    entrypoint()
