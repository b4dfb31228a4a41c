#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
UDP orientation receiver - phone -> game

A phone (sensor-streaming app or a small web page relaying
``deviceorientation`` events) sends one JSON object per datagram:

    {"alpha": 12.5, "beta": 81.0, "gamma": -3.2}

Each decoded object is pushed into the OrientationSampler; the sampler
decides whether the event is well formed. Datagrams that are not JSON
objects are dropped here.
"""

import json
import logging
import socket
import threading
from typing import Any, Dict, Optional

from core.imu.orientation_sampler import OrientationSampler
from utils.config_sections import ReceiverConfig, load_receiver_config

log = logging.getLogger("game.sensor")


class MessageDecodeError(Exception):
    """Raised when a datagram is not a JSON object"""
    pass


def decode_datagram(data: bytes) -> Dict[str, Any]:
    """Decode one datagram into an event mapping"""
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MessageDecodeError(f"Invalid datagram: {e}") from e
    if not isinstance(payload, dict):
        raise MessageDecodeError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


class OrientationReceiver:
    """
    UDP server feeding the sampler from a background thread

    Attributes:
        datagrams_received: datagrams read from the socket
        datagrams_rejected: datagrams that failed to decode
    """

    def __init__(self, sampler: OrientationSampler, config: Optional[ReceiverConfig] = None):
        self.sampler = sampler
        self.config = config or load_receiver_config()

        self.server_socket: Optional[socket.socket] = None
        self.running = False
        self._thread: Optional[threading.Thread] = None

        self.datagrams_received = 0
        self.datagrams_rejected = 0

    @property
    def address(self):
        if self.server_socket is None:
            return None
        return self.server_socket.getsockname()

    def start(self) -> bool:
        """Bind the socket and start the receive thread"""
        if self.running:
            return True
        try:
            self.server_socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            self.server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.server_socket.bind((self.config.host, self.config.port))
            self.server_socket.settimeout(self.config.socket_timeout)
        except OSError as e:
            log.error("Failed to bind orientation receiver on %s:%s: %s", self.config.host, self.config.port, e)
            self._close_socket()
            return False

        self.running = True
        self._thread = threading.Thread(target=self._receive_loop, daemon=True)
        self._thread.start()
        log.info("Orientation receiver listening on %s:%s", *self.address[:2])
        return True

    def _receive_loop(self) -> None:
        while self.running:
            try:
                data, _ = self.server_socket.recvfrom(self.config.max_datagram)
            except socket.timeout:
                continue
            except OSError as e:
                if self.running:
                    log.error("Orientation receiver socket error: %s", e)
                break
            self.handle_datagram(data)

    def handle_datagram(self, data: bytes) -> bool:
        """Decode one datagram and push it to the sampler"""
        self.datagrams_received += 1
        try:
            event = decode_datagram(data)
        except MessageDecodeError as e:
            self.datagrams_rejected += 1
            log.debug("%s", e)
            return False
        return self.sampler.on_orientation_event(event)

    def stop(self) -> None:
        self.running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        self._close_socket()
        log.info(
            "Orientation receiver stopped (received=%d, rejected=%d)",
            self.datagrams_received, self.datagrams_rejected,
        )

    def _close_socket(self) -> None:
        if self.server_socket is not None:
            try:
                self.server_socket.close()
            except OSError:
                pass
            self.server_socket = None
