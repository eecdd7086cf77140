"""Kernel dispatch endpoint."""
