"""docs_walker.crawler: link normalization, dedup, fetching and the walker itself."""
