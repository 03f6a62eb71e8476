"""Shared test helpers for kubelevate."""
