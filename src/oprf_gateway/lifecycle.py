"""
Service lifecycle: one-time wiring of KeyStore -> protocol engine.

The lifecycle object is created once per process and handed to the gateway.
Request handlers reach the engine only through ``server``/``service``,
which raise NotReadyError until initialize() has completed.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from .config import ServiceConfig
from .errors import InitializationError, NotReadyError
from .keys import KeyStore
from .primitives import Suite
from .protocol import OPRFServer, OPRFService

logger = logging.getLogger(__name__)


class ServiceLifecycle:
    """Owns the active key and engine for the lifetime of the process."""

    def __init__(self, config: ServiceConfig, key_store: Optional[KeyStore] = None):
        self.config = config
        self._key_store = key_store or KeyStore(config.suite)
        self._lock = threading.Lock()
        self._service: Optional[OPRFService] = None
        self._closed = False
        self.initialized_at: Optional[datetime] = None

    @property
    def is_ready(self) -> bool:
        return self._service is not None and not self._closed

    @property
    def suite(self) -> Optional[Suite]:
        return self._service.suite if self._service is not None else None

    @property
    def service(self) -> OPRFService:
        if not self.is_ready:
            raise NotReadyError("OPRF service is not initialized")
        return self._service

    @property
    def server(self) -> OPRFServer:
        return self.service.server

    def initialize(self) -> OPRFService:
        """
        Load the key and build the engine exactly once.

        Raises:
            KeyLoadError: If the key file cannot be loaded
            InitializationError: If wiring fails, initialization was
                already performed or the lifecycle was shut down
        """
        with self._lock:
            if self._closed:
                raise InitializationError("OPRF service lifecycle has been shut down")
            if self._service is not None:
                raise InitializationError("OPRF service is already initialized")

            if self._key_store.suite != self.config.suite:
                raise InitializationError(
                    f"Key store suite {self._key_store.suite.value} does not match "
                    f"configured suite {self.config.suite.value}"
                )

            key = self._key_store.load(self.config.key_path)
            try:
                service = OPRFService(key, max_batch_size=self.config.max_batch_size)
            except Exception as e:
                raise InitializationError(f"Failed to initialize OPRF service: {e}") from e

            self._service = service
            self.initialized_at = datetime.now(timezone.utc)

        logger.info(
            "OPRF service initialized (suite=%s, key=%s, max_batch_size=%d)",
            service.suite.value,
            service.server.key_fingerprint,
            self.config.max_batch_size,
        )
        return service

    def shutdown(self) -> None:
        """Stop serving. The lifecycle cannot be initialized again."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        logger.info("OPRF service shut down")
