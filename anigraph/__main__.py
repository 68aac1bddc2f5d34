"""Main entry point when executing anigraph as a package.

This allows running the package using python -m anigraph.
"""

from anigraph.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
