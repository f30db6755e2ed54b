"""Zone hierarchy management for Cisco APIC fabrics."""

__version__ = "0.1.0"
