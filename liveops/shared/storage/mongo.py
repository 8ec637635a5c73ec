"""
Simple MongoDB client manager that creates and tracks clients.
"""

import threading
from urllib.parse import parse_qs

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient

from ..config import config


class MongoManager:
    """
    Simple MongoDB client manager.

    Features:
    - Creates and tracks MongoDB clients per label
    - Loads MONGO_URL_<LABEL> connection strings from configuration
    - Supports replica set connections with automatic detection
    - Configurable connection pool size and timeouts

    Environment Variables Priority (highest to lowest) for the default label:
    1. MONGO_URL_DEFAULT - Explicit default connection string
    2. MONGO_URL - System default connection string
    3. Hardcoded fallback - mongodb://localhost:27017
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, "_initialized"):
            return

        self._clients: dict[str, AsyncIOMotorClient] = {}
        self._connection_strings: dict[str, str] = {}
        self._lock = threading.Lock()

        self._load_connection_strings()

        self._max_pool_size = config.get_mongo_max_pool_size()
        self._server_selection_timeout = config.get_mongo_server_selection_timeout()
        self._connect_timeout = config.get_mongo_connect_timeout()
        self._socket_timeout = config.get_mongo_socket_timeout()
        logger.info(
            "Loaded MongoDB parameters: pool={} server_selection={}ms connect={}ms socket={}ms",
            self._max_pool_size,
            self._server_selection_timeout,
            self._connect_timeout,
            self._socket_timeout,
        )

        self._initialized = True

    @staticmethod
    def _get_label_from_env_var(env_var: str) -> str | None:
        if env_var.startswith("MONGO_URL_"):
            return env_var[10:].lower()
        return None

    def _load_connection_strings(self):
        """Load MongoDB connection strings from centralized configuration."""
        for key, value in config.items():
            label = self._get_label_from_env_var(key)
            if label is None or not value:
                continue
            if label in self._connection_strings:
                logger.warning(
                    "MongoDB connection string for label '{}' already exists, '{}' will override it",
                    label,
                    key,
                )
            self._connection_strings[label] = value
            logger.info(
                "Loaded MongoDB connection string for label '{}': {}",
                label,
                hide_password(value),
            )

        if "default" not in self._connection_strings:
            self._connection_strings["default"] = config.get_mongo_url("default")

        logger.info(
            "Loaded {} MongoDB connection strings: {}",
            len(self._connection_strings),
            list(self._connection_strings.keys()),
        )

    def has_label(self, label: str) -> bool:
        """Whether a connection string is configured for the label."""
        return bool(self._connection_strings.get(label))

    def _create_client(self, connection_string: str, label: str) -> AsyncIOMotorClient:
        options = dict(
            serverSelectionTimeoutMS=self._server_selection_timeout,
            connectTimeoutMS=self._connect_timeout,
            socketTimeoutMS=self._socket_timeout,
            maxPoolSize=self._max_pool_size,
        )

        replica_set_name = extract_replica_set_name(connection_string)
        if replica_set_name:
            logger.info("Open MongoDB client for label '{}' with replica set '{}'", label, replica_set_name)
            options["replicaSet"] = replica_set_name
        else:
            logger.info("Open MongoDB client for label '{}'", label)

        return AsyncIOMotorClient(connection_string, **options)

    def get_client(self, label: str | None = None) -> AsyncIOMotorClient:
        """
        Get MongoDB client by label.

        Raises:
            ValueError: If no connection string is configured for the label
        """
        label = label or "default"

        with self._lock:
            if label not in self._clients:
                if not self.has_label(label):
                    raise ValueError(f"No MongoDB connection string found for label '{label}'")
                self._clients[label] = self._create_client(self._connection_strings[label], label)

            return self._clients[label]

    def close_client(self, label: str):
        with self._lock:
            client = self._clients.pop(label, None)
        if client is not None:
            client.close()
            logger.info("Closed MongoDB client for label '{}'", label)

    def close_all(self):
        with self._lock:
            labels = list(self._clients.keys())
        for label in labels:
            self.close_client(label)


def hide_password(connection_string: str) -> str:
    """Mask the password part of a MongoDB connection string for logging."""
    if "://" not in connection_string:
        return connection_string

    scheme, rest = connection_string.split("://", 1)
    at = rest.rfind("@")
    if at == -1:
        return connection_string

    auth, host = rest[:at], rest[at + 1 :]
    username, sep, password = auth.partition(":")
    if not sep or not username or not password:
        return connection_string

    return f"{scheme}://{username}:***@{host}"


def extract_replica_set_name(connection_string: str) -> str | None:
    """Return the replicaSet query parameter, if any."""
    _, sep, query = connection_string.partition("?")
    if not sep:
        return None
    values = parse_qs(query).get("replicaSet")
    return values[0] if values else None


_mongo_manager: MongoManager | None = None


def get_mongo_manager() -> MongoManager:
    """Get the global MongoDB manager instance."""
    global _mongo_manager
    if _mongo_manager is None:
        _mongo_manager = MongoManager()
    return _mongo_manager