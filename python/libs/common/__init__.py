"""Models shared between Python services."""
