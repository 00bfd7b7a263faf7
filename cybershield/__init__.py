"""CyberShield marketing site backend."""
