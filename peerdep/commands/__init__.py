"""CLI command implementations for peerdep."""
