"""Relational storage layer.

This module owns the SQLite connection and the schema synchronization
that grows each dataset relation as new columns appear.
"""
