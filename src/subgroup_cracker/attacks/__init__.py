"""End-to-end attack pipelines."""
