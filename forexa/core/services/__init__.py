"""Market data aggregation, feature extraction and prediction services."""
