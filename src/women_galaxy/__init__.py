# ABOUTME: Women Galaxy importer package
# ABOUTME: Wikipedia → structured profile pipeline with photo re-hosting

__version__ = "1.0.0"
