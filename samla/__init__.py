"""
Samla
-----

Core of a personal inventory catalog (locations, boxes, bags, item sets,
elements and tags): schema migrations, search query compilation and
photo asset lifecycle on top of a local SQLite store.
"""
__version__ = "0.3.0"
