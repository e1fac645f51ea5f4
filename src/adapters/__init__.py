"""Adaptadores de I/O: un módulo por servicio HTTP, más exportación JSON."""
