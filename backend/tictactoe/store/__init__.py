from .user_store import UserStore, JsonFileUserStore, RedisUserStore, build_user_store

__all__ = ["UserStore", "JsonFileUserStore", "RedisUserStore", "build_user_store"]
