"""
Room Settle - Source Package

A settlement engine for small groups that need to agree on a date
and split shared expenses without accounts.

DESIGN PRINCIPLES:
1. The engine is pure: snapshots in, fresh values out
2. Money is Decimal, rounded to cents at every boundary
3. No silent coercion of user-entered amounts
4. Storage is an external collaborator behind an interface
5. Every settlement action is auditable
"""

__version__ = "1.0.0"
__author__ = "Room Settle Team"
