"""Shell helpers: output rendering and input validation."""
