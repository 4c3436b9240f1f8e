"""Infrastructure layer — backends, value cipher, consistency guard, store.

This layer depends on stdlib and third-party libs (SQLAlchemy, boto3,
cryptography). It must never import from services, commands, or output.
The service layer bridges between callers and the attribute store.
"""
