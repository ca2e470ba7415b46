"""Modelos, descriptores y errores del dominio.

Por qué:
- Aquí viven las estructuras de datos estrictas (Pydantic v2) y la taxonomía
  de errores que comparten adaptadores y CLI.
- El dominio no importa httpx, typer ni rich.
"""
