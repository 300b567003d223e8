"""Resolver package for the GraphQL schema.

Query, mutation and field resolvers live in sibling modules grouped by the
entity they act on.
"""
