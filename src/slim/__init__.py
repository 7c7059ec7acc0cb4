"""SLIM: maintenance scripts for the .stylelintignore workflow."""

__version__ = "0.1.0"
