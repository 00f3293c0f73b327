"""Full-text search over a static blog's posts."""
