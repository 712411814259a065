"""Click sub-command groups registered by ``devstrap.main``."""
