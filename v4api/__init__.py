"""v4api: wire contract between the search aggregator, its pools, and clients."""
