"""Pure scheduling rules with no database or clock access."""
