"""CLI package for Gutenberg Reader sync"""
from .main import cli

__all__ = ['cli']
