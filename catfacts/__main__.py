"""Main entry point when executing catfacts as a package.

This allows running the package using python -m catfacts.
"""

from catfacts.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
