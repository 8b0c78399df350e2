import logging
import signal
from typing import Optional

from app_config import (
    AppConfig,
    AppConfigurationError,
    TomlConfigSource,
    load_app_config,
    resolve_config_path,
)
from pomodoro import SoundPlayer
from runtime import RuntimeBootstrap, RuntimeEngine
from server import ServerConfigurationError, UIServer, UIServerConfig


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomodoro_app")


def setup_signal_handlers(engine: RuntimeEngine) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        signal_name = signal.Signals(signum).name
        logging.getLogger("pomodoro_app").info("%s received, stopping...", signal_name)
        engine.request_stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_sound_player(
    app_config: AppConfig,
    logger: logging.Logger,
) -> Optional[SoundPlayer]:
    if not app_config.sound.enabled:
        return None
    try:
        from sound import SoundDevicePlayer
    except OSError as error:
        # sounddevice raises OSError when the PortAudio library is missing.
        logger.warning("Sound disabled: %s", error)
        return None
    return SoundDevicePlayer(
        app_config.sound.output_device,
        volume=app_config.sound.volume,
        bell_fallback=app_config.sound.bell_fallback,
        logger=logging.getLogger("sound"),
    )


def main() -> int:
    """Run the pomodoro status timer until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config(str(config_path))
        logger.info("Loaded runtime config: %s", config_path)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    ui_server: Optional[UIServer] = None
    try:
        server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        return 1

    if server_config.enabled:
        ui_server = UIServer(server_config, logger=logging.getLogger("ui_server"))

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logger,
            app_config=app_config,
            config_source=TomlConfigSource(config_path),
            ui_server=ui_server,
            sound_player=build_sound_player(app_config, logger),
        )
    )
    setup_signal_handlers(engine)

    if ui_server is not None:
        ui_server.set_message_handler(engine.handle_client_message)
        try:
            ui_server.start()
        except RuntimeError as error:
            logger.error("UI server failed to start: %s", error)
            engine.shutdown()
            return 1

    try:
        return engine.run()
    finally:
        if ui_server is not None:
            ui_server.stop()


if __name__ == "__main__":
    raise SystemExit(main())
