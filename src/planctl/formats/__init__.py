"""Formats layer — text documents for records.

Dependency rule: formats imports from domain only. No I/O happens here;
every function maps strings to models and back.
"""
