"""HTTP routes package.

- auth: login/logout and the current user
- photos: ownership-scoped photo view, update and tagging
- albums: album listings and CSV export
"""
