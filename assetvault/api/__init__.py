"""HTTP transport for the asset service."""
