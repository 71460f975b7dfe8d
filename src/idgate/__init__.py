"""IdGate - leased worker identifier coordinator."""

__version__ = "0.1.0"
