"""Routing-and-resilience core: pricing, quality scoring, routing, caching."""
