"""Stacked diffs: ordered chains of dependent branches, one merge request each."""
