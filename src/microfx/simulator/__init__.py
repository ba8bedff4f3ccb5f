"""pygame preview window (install the ``simulator`` extra)."""
