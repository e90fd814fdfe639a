"""HTTP gateway application."""
