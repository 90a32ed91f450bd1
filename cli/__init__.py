"""SiteScope command-line interface."""
