"""
Live reloading of a TLS certificate and key pair.

``CertManager`` watches the directories holding the certificate and key,
waits for a burst of changes to settle, validates the new pair and publishes
it for the TLS layer. A pair that fails to load never replaces a good one.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from enum import Enum
from typing import TYPE_CHECKING

from hotcert.common.config import Config
from hotcert.common.exceptions import (
    LoadError,
    ManagerStateError,
    NoCertificateError,
    WatchBackendError,
    WatchSubscriptionError,
)
from hotcert.common.logging_utils import NullSink
from hotcert.common.models import FileEvent, WatchTarget
from hotcert.loader import KeyPairLoader
from hotcert.store import KeyPairStore
from hotcert.watcher import DirectoryWatch

if TYPE_CHECKING:
    import ssl

    from watchdog.observers.api import BaseObserver

    from hotcert.common.interfaces import LogSink
    from hotcert.loader import KeyPair
    from hotcert.tls import ContextSelector

logger = logging.getLogger(__name__)

_STOP = object()


class ManagerState(Enum):
    """Lifecycle of a CertManager."""

    IDLE = "idle"
    WATCHING = "watching"
    STOPPED = "stopped"


class CertManager:
    """Watches a certificate and key pair and keeps the loaded copy current."""

    def __init__(
        self,
        cert_path: str | os.PathLike[str],
        key_path: str | os.PathLike[str],
        *,
        logger: LogSink | None = None,
        debounce: float | None = None,
        loader: KeyPairLoader | None = None,
        store: KeyPairStore | None = None,
        observer: BaseObserver | None = None,
    ):
        self.config = Config()
        self.target = WatchTarget.from_paths(cert_path, key_path)

        self.debounce = self.config.DEBOUNCE_SECONDS if debounce is None else debounce
        if self.debounce <= 0:
            msg = f"debounce must be positive, got {self.debounce}"
            raise ValueError(msg)

        self.log: LogSink = logger or NullSink()
        self.loader = loader or KeyPairLoader()
        self.store = store or KeyPairStore()

        self._observer = observer
        self._events: queue.Queue = queue.Queue()
        self._watch: DirectoryWatch | None = None
        self._thread: threading.Thread | None = None
        self._stopping = threading.Event()
        self._state = ManagerState.IDLE
        self._state_lock = threading.Lock()
        self._selector: ContextSelector | None = None

    def set_logger(self, sink: LogSink) -> None:
        """Replace the log sink."""
        self.log = sink

    @property
    def state(self) -> ManagerState:
        return self._state

    @property
    def certificate(self) -> KeyPair | None:
        return self.store.get()

    def start(self) -> None:
        """Start watching the certificate and key files.

        Performs one synchronous load before returning. A pair that does not
        load is logged, not raised: the files may be fixed later.

        Raises:
            ManagerStateError: Already started, or stopped.
            WatchSubscriptionError: A file is missing or its directory cannot be watched.
        """
        with self._state_lock:
            if self._state is not ManagerState.IDLE:
                msg = f"can't start a manager that is {self._state.value}"
                raise ManagerStateError(msg)

            for side, path in self.target.sides():
                if not path.exists():
                    msg = f"can't watch {side} file: {path} does not exist"
                    raise WatchSubscriptionError(msg, side=side)

            watch = DirectoryWatch(self._events, self._observer)
            watch.open()
            try:
                for directory in self.target.directories:
                    side = "cert" if directory == self.target.cert_path.parent else "key"
                    watch.add(directory, side)
                self._load()
                self.log.info("watching for cert and key change")
            except Exception:
                watch.close(self.config.STOP_TIMEOUT)
                raise
            self._watch = watch

            self._stopping.clear()
            self._thread = threading.Thread(
                target=self._run, name="hotcert-watch", daemon=True
            )
            self._state = ManagerState.WATCHING
            self._thread.start()

    def stop(self) -> None:
        """Stop watching and wait for the background loop to exit.

        Stopping a stopped manager does nothing.

        Raises:
            ManagerStateError: The manager was never started.
        """
        with self._state_lock:
            if self._state is ManagerState.STOPPED:
                return
            if self._state is ManagerState.IDLE:
                msg = "can't stop a manager that was never started"
                raise ManagerStateError(msg)

            self._stopping.set()
            self._events.put(_STOP)
            if self._thread is not None and self._thread is not threading.current_thread():
                self._thread.join()
            self._thread = None
            self._state = ManagerState.STOPPED

    def reload_now(self) -> KeyPair:
        """Load and publish the pair immediately, bypassing the debounce.

        Raises:
            LoadError: The pair on disk is not usable; the active pair is kept.
        """
        pair = self.loader.load(self.target.cert_path, self.target.key_path)
        self.store.set(pair)
        self.log.info("certificate and key loaded")
        return pair

    def get_certificate(self, hello: object = None) -> KeyPair:
        """Return the active pair for a server handshake.

        Raises:
            NoCertificateError: Nothing has loaded yet.
        """
        pair = self.store.get()
        if pair is None:
            raise NoCertificateError
        return pair

    def get_client_certificate(self, info: object = None) -> KeyPair:
        """Return the active pair when acting as a TLS client.

        Raises:
            NoCertificateError: Nothing has loaded yet.
        """
        return self.get_certificate(info)

    def server_context(self) -> ssl.SSLContext:
        """Server-side SSLContext that presents the active pair on every handshake."""
        from hotcert.tls import ContextSelector  # noqa: PLC0415

        if self._selector is None:
            self._selector = ContextSelector(self)
        return self._selector.server_context()

    def _load(self) -> bool:
        try:
            pair = self.loader.load(self.target.cert_path, self.target.key_path)
        except LoadError as err:
            self.log.warning("can't load cert or key file: %s", err)
            return False
        except Exception as err:
            logger.exception("Unexpected error loading %s", self.target.cert_path)
            self.log.warning("can't load cert or key file: %s", err)
            return False
        self.store.set(pair)
        self.log.info("certificate and key loaded")
        return True

    def _is_relevant(self, event: FileEvent) -> bool:
        if event.event_type not in self.config.RELOAD_EVENT_TYPES:
            return False
        watched = (str(self.target.cert_path), str(self.target.key_path))
        for path in event.paths:
            if path in watched:
                return True
            if any(path.endswith(m) for m in self.config.INDIRECT_MOUNT_MARKERS):
                return True
        return False

    def _run(self) -> None:
        self.log.debug("running")
        deadline: float | None = None
        try:
            while not self._stopping.is_set():
                timeout = self.config.HEALTH_CHECK_INTERVAL
                if deadline is not None:
                    timeout = min(timeout, max(0.0, deadline - time.monotonic()))
                try:
                    item = self._events.get(timeout=timeout)
                except queue.Empty:
                    item = None

                if item is _STOP or self._stopping.is_set():
                    break

                try:
                    if isinstance(item, WatchBackendError):
                        self.log.error("error watching files: %s", item)
                    elif isinstance(item, FileEvent) and self._is_relevant(item):
                        if deadline is None:
                            self.log.info(
                                "%s was modified (%s), queue reload",
                                item.paths[-1],
                                item.event_type,
                            )
                        deadline = time.monotonic() + self.debounce

                    if deadline is not None and time.monotonic() >= deadline:
                        deadline = None
                        self.log.debug("reloading")
                        self._load()

                    if self._watch is not None:
                        self._watch.check_alive()
                except Exception:
                    # One bad iteration must not end the loop.
                    logger.exception("Certificate watch loop iteration failed")
        finally:
            if self._watch is not None:
                self._watch.close(self.config.STOP_TIMEOUT)
                self._watch = None
            self.log.info("stopped watching")

    def __enter__(self) -> CertManager:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
