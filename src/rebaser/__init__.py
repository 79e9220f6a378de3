"""Rebase stacks of dependent pull requests onto their bases."""
