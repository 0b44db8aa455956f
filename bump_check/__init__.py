"""Check that every changed workspace of a monorepo has a release decision."""
