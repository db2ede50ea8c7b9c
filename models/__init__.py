"""Catalog models and the shared storage singleton.

`storage` is configured by the application factory (catalog.create_app);
scripts can call storage.reload() directly to use DATABASE_URL.
"""
from models.db_storage import DBStorage

storage = DBStorage()
