"""
Web module.

Flask JSON API for Sparks.
"""
