"""
Use Cases

Organized into domain folders:
- records/: scoped reads, cascade delete and restore
- tenants/: platform bootstrap and tenant onboarding
- context/: actor context resolution
- admin/: TTL purge
"""
