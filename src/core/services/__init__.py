"""Servicios del Core (orquestación de adaptadores)."""
