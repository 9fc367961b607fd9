"""Structure data model."""
