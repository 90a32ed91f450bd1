"""SiteScope: fetch a web page, extract its structure, summarise it, keep it."""

__version__ = "0.1.0"
