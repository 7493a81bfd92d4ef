"""
Restaurant catalog access.

The catalog is an external collaborator: the rest of the package only
relies on ``CatalogClient.search``. ``LocalCatalog`` serves pages from a
CSV table so the service runs without a remote provider.
"""
