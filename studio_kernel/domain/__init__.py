"""Pure domain types for the studio kernel."""
