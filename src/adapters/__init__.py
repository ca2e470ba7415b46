"""Adaptadores de I/O: HTTP (httpx), OAuth y exportación JSON."""
