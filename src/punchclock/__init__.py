"""Punchclock package.

This package is organized by feature modules (clock, users) with a thin
Flask controller layer on top of service/repository layers.
"""
