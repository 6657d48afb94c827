"""
Cloud storage client for MakeCode-style editor projects.

Saves, lists, fetches, updates and deletes project bundles on a remote
project-store API and installs cloud projects into a local workspace.
"""

__version__ = "0.1.0"
