# extensions.py — single access point for the per-app objects shared by blueprints
# The config and the store are built once in create_app() and hung on app.extensions.
from flask import current_app

from config import RoomsConfig
from storage import RoomStore

CONFIG_KEY = "rooms_config"
STORE_KEY = "rooms_store"


def init_extensions(app, config: RoomsConfig) -> RoomStore:
    store = RoomStore(config.data_dir, config.max_file_bytes)
    store.ensure_base()
    app.extensions[CONFIG_KEY] = config
    app.extensions[STORE_KEY] = store
    return store


def get_config() -> RoomsConfig:
    return current_app.extensions[CONFIG_KEY]


def get_store() -> RoomStore:
    return current_app.extensions[STORE_KEY]


__all__ = ["init_extensions", "get_config", "get_store"]
