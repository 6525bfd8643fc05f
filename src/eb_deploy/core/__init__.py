"""eb-deploy core modules."""
