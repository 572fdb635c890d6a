"""HTTP surface for the storefront catalog."""
