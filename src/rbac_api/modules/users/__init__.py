"""Users module: credential store, user queries and role assignment."""
