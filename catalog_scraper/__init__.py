"""Profile-driven product scraper for paginated e-commerce catalogs."""

__version__ = "0.1.0"
