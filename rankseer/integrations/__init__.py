"""Third-party service clients: Google Custom Search and LLM providers."""
