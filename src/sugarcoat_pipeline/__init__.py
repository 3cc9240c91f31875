"""SugarCoat pipeline: crawl a page, extract ad-block-implicated scripts, rewrite them."""

__version__ = "0.1.0"
