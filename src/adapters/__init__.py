"""Adapters binding the core ports to GitHub and the Actions runner."""
