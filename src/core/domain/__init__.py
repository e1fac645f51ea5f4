"""Modelos y entidades del dominio.

El dominio no conoce HTTP ni CLI: solo IPs, coordenadas y pases.
"""
