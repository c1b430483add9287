"""Pricing engine: cost calculation and template rule evaluation."""
