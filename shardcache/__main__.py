"""Main entry point when executing shardcache as a package.

This allows running the package using python -m shardcache.
"""

from shardcache.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
