"""Dataset interaction logging and popularity ranking service."""
