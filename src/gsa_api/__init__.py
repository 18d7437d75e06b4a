"""gsa-api: HTTP query service for gene-set enrichment across Expression Atlas comparisons."""

__version__ = "0.1.0"
