"""Bootstrap steps — one module per concern."""
