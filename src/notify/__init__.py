# src/notify/__init__.py — v1
