"""HTTP routes over the pricing services."""
