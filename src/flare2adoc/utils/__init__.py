#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/utils/__init__.py
"""Utility helpers for text handling and escaping."""
