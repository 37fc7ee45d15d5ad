"""
Saved locations ("favorites").

Responsibilities:
- Persist the user's saved location ids in a namespaced key-value store.
- Treat unreadable stored data as "nothing saved".
- Resolve saved ids against the catalog for the Saved page.
"""
