"""Adapter facade exposing lint engine integrations (SLIM)."""

from . import stylelint

__all__ = ["stylelint"]
