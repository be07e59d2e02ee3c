"""Local project inspection: version metadata and git remote identity."""
