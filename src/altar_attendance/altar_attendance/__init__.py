"""Altar-server attendance package.

Organized by feature modules (roster, attendance, sync, cache, users) with a thin
Flask controller layer over a per-group state store.
"""
