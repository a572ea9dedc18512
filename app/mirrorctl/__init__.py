"""mirrorctl - reconcile a machine with its versioned dotfile mirror."""

__version__ = "0.3.0"
