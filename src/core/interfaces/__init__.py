"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Los servicios dependen de `JsonApi`, no del cliente httpx.
"""

from core.interfaces.api import JsonApi

__all__ = ["JsonApi"]
