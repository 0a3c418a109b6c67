"""StarAPI command-line interface."""
