from .mongodb import init_mongodb, close_mongo_connection, check_mongo_connection

__all__ = [
    "init_mongodb",
    "close_mongo_connection",
    "check_mongo_connection",
]
