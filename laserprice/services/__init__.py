"""Application services over the pricing engine and template catalog."""
