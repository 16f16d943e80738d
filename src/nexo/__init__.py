"""nexo — API de gestão doméstica com acesso externo por API key."""

__version__ = "1.0.0"
