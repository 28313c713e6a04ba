# src/gateways/__init__.py — v1
