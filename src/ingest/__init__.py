"""Dataset ingestion pipeline.

This module reads raw dataset sources, strips wrapping preambles,
remaps historic column names, and streams rows into the store.
"""
