"""Configuration — optional YAML overrides for unattended runs."""
