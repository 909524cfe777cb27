"""intentsql - natural-language query intents compiled to SQL at build time.

Static analysis of a fluent-builder schema and of query sites in
TypeScript sources, with content-addressed identity, change
categorization and a generated-query cache.
"""

__version__ = "0.1.0"
