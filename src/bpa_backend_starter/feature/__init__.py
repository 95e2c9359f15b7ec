"""Sample business feature wired to an approval workflow."""
