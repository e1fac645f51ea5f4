"""Core: dominio, contratos, configuración y orquestación."""
