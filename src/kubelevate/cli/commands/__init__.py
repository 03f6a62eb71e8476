"""Root-level kubelevate commands (auto-discovered)."""
