"""Main entry point for the Tiko MQTT bridge."""
import asyncio
import logging
import os
import sys

from .config import Configuration, load_configuration
from .mqtt_manager import MQTTManager

# Logging configuration
FORMAT = ('%(asctime)-15s %(threadName)-15s '
          '%(levelname)-8s %(module)-15s:%(lineno)-8s %(message)s')

log = logging.getLogger(__name__)


def setup_logging():
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(format=FORMAT, level=level)


async def main() -> Configuration:
    """Load configuration and verify the broker before anything else starts."""
    log.info("--- Starting Tiko MQTT Bridge ---")

    result = load_configuration()
    if result.is_err():
        log.critical(f"Failed to load configuration: {result.error}")
        sys.exit(1)
    config = result.value

    try:
        mqtt = MQTTManager(config.mqtt)
    except ValueError as e:
        log.critical(f"Invalid MQTT configuration: {e}")
        sys.exit(1)

    log.info(
        f"Configuration loaded: provider={config.tiko.provider.value} "
        f"property_id={config.tiko.property_id or 'default'} "
        f"broker={mqtt.address} "
        f"interval={config.update_interval_minutes}min"
    )

    if not await mqtt.check_connection():
        log.critical(f"MQTT Broker at {mqtt.address} is unreachable")
        sys.exit(1)

    return config


def run():
    setup_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
