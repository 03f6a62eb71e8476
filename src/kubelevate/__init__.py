"""
kubelevate - elevation shim for cluster CLIs

Runs kubectl/oc (or any command) against a temporary copy of the active
kubeconfig whose current user carries an audit reason.
"""

__version__ = "0.3.0"
__all__ = ["__version__"]
