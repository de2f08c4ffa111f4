"""
Endpoint modules.

Each module defines an APIRouter for one domain (students, users,
protected).  The routers are aggregated in ``api/router.py``.
"""
