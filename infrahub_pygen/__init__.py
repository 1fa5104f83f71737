"""Generate typed async Python clients from an Infrahub GraphQL schema."""

__version__ = "0.1.0"
