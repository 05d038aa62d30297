"""Built-in best-practice rules."""
