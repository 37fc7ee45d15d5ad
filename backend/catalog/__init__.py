"""
Location catalog package.

Responsibilities:
- Load the bundled family-activity dataset and its filter labels.
- Normalise raw records into the canonical catalog frame.
- Filter the catalog and rank results by distance to the user.
"""
