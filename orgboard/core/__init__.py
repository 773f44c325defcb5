"""Cross-cutting infrastructure: config, persistence, auth, access policy, middleware."""
