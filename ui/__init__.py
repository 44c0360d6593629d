"""HTTP surface for the panels."""
