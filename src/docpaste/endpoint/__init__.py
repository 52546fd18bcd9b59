"""HTTP endpoint for the docpaste overlay UI."""
