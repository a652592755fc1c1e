"""Keep pull request review comments in sync with linter offenses."""

__version__ = "0.1.0"
