"""MQTT broker connection for the Tiko bridge."""
import asyncio
import logging
import ssl
from typing import Any, Dict
from urllib.parse import unquote, urlsplit

import aiomqtt

from .config import MqttConfig

log = logging.getLogger(__name__)

# scheme -> (transport, default port, tls)
SCHEMES = {
    "mqtt": ("tcp", 1883, False),
    "tcp": ("tcp", 1883, False),
    "mqtts": ("tcp", 8883, True),
    "ssl": ("tcp", 8883, True),
    "ws": ("websockets", 80, False),
    "wss": ("websockets", 443, True),
}


class BrokerUrlError(ValueError):
    """Raised when MQTT_BROKER_URL cannot be turned into a connection."""


def broker_connection_args(config: MqttConfig) -> Dict[str, Any]:
    """Build aiomqtt.Client keyword arguments from the broker URL.

    Explicit MQTT_USERNAME / MQTT_PASSWORD win over credentials embedded
    in the URL.
    """
    url = config.broker_url.strip()
    if "://" not in url:
        url = f"mqtt://{url}"

    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in SCHEMES:
        raise BrokerUrlError(f"Unsupported MQTT broker scheme '{parts.scheme}'")
    if not parts.hostname:
        raise BrokerUrlError(f"MQTT broker URL has no host (scheme '{parts.scheme}')")
    try:
        port = parts.port
    except ValueError as e:
        raise BrokerUrlError(f"Invalid port for MQTT broker {parts.hostname}: {e}") from e

    transport, default_port, tls = SCHEMES[scheme]
    username = config.username
    password = config.password
    if username is None and parts.username:
        username = unquote(parts.username)
    if password is None and parts.password:
        password = unquote(parts.password)

    args: Dict[str, Any] = {
        "hostname": parts.hostname,
        "port": port or default_port,
        "username": username,
        "password": password,
        "transport": transport,
    }
    if transport == "websockets":
        args["websocket_path"] = parts.path or "/"
    if tls:
        args["tls_context"] = ssl.create_default_context()
    return args


class MQTTManager:
    def __init__(self, config: MqttConfig):
        self._config = config
        self._args = broker_connection_args(config)

    @property
    def address(self) -> str:
        return f"{self._args['hostname']}:{self._args['port']}"

    def client(self) -> aiomqtt.Client:
        """Return a new, not yet connected, aiomqtt client."""
        return aiomqtt.Client(**self._args)

    async def check_connection(self, attempts: int = 3, retry_delay: float = 5.0) -> bool:
        """Connect to the broker once to verify address and credentials."""
        for attempt in range(1, attempts + 1):
            try:
                log.info(f"Connecting to MQTT Broker at {self.address} (attempt {attempt}/{attempts})...")
                async with self.client():
                    log.info("Connected to MQTT Broker!")
                    return True
            except aiomqtt.MqttError as e:
                log.error(f"MQTT Connection error: {e}")
            if attempt < attempts:
                await asyncio.sleep(retry_delay)
        return False
