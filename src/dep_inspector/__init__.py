"""Dep Inspector — risk management for third-party Cargo dependencies.

Walks the resolved dependency graph of a Cargo workspace to tell which
packages each root crate pulls in, and which transitive dependencies would
disappear together with a single direct dependency.
"""

__version__ = "0.1.0"
