"""Comandos Typer de la CLI."""
