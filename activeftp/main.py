import argparse
import logging
import signal
import sys

from activeftp.entities.ftp_server import FtpServer
from activeftp.entities.settings import DEFAULT_CONFIG_PATH, Settings, SettingsError

logger = logging.getLogger("activeftp.main")


def log_connected_clients(server: FtpServer, session) -> None:
    """Al unirse un cliente, registra la lista de sesiones conectadas."""
    sessions = server.sessions.snapshot()
    logger.info("Connected users (%d):", len(sessions))
    for info in sessions:
        logger.info("    - IP : %s  |  Username : %s  |  Working Directory : %s",
                    info["client"], info["username"] or "Not Logged In", info["cwd"])


def serve(args) -> int:
    settings = Settings.load(args.config)
    server = FtpServer(settings, host=args.host, port=args.port, on_client=log_connected_clients)

    def _handle_signal(signum, frame):
        print('\nShutting down listener')
        server.shutdown()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    server.bind()
    server.serve_forever()
    return 0


def adduser(args) -> int:
    settings = Settings.load(args.config)
    settings.add_user(args.username, args.password)
    settings.save(args.config)
    print(f"User {args.username} saved to {args.config}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="activeftp", description="Active-mode FTP server")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Archivo de configuración JSON")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command")

    serve_parser = sub.add_parser("serve", help="Iniciar el servidor")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=2121)
    serve_parser.set_defaults(func=serve)

    user_parser = sub.add_parser("adduser", help="Agregar o actualizar un usuario")
    user_parser.add_argument("username")
    user_parser.add_argument("password")
    user_parser.set_defaults(func=adduser)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(argv + ["serve"])

    logging.basicConfig(level=getattr(logging, args.log_level), format='%(asctime)s %(levelname)s %(name)s %(message)s')

    try:
        return args.func(args)
    except SettingsError as e:
        logger.error("%s", e)
        return 2
    except OSError as e:
        logger.error("Unable to start server: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
