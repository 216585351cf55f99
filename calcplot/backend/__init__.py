"""Expression engine, calculator state, settings and theme."""
