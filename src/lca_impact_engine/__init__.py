"""Environmental impact resolution and allocation engine for drinks products."""
