# src/run/__init__.py — v1
