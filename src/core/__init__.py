"""Core: configuración, dominio, servicios y credenciales (sin httpx ni Rich)."""
