"""
Swipy restaurant selection service.

Responsibilities:
- Serve restaurant discovery pages with already-decided restaurants removed.
- Record swipes and favorites per user.
- Detect restaurants liked by both a user and their friends.
- Run elimination tournaments over a user's favorites.
- Store notifications and reconcile them with a client-side cache.
"""
