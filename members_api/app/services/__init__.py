"""
Service layer.

Services hold the business logic for a resource and talk to the
database only through ``core.db.StorageGateway``.
"""
