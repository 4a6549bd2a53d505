"""Infrastructure layer — Git subprocess bridge, staged mirror, registry file."""
