"""StarAPI core components."""
