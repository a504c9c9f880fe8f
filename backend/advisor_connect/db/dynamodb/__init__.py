"""DynamoDB storage backend.

- boto3 client/resource configuration
- retry/backoff for throttling and transient service failures
- typed errors, translated to StorageError at the entity-store boundary
- single-table layout for every collection
"""
