"""GraphQL API for ServerList."""
