__all__ = ["ClientSession", "Command", "FtpServer", "SessionTable", "Settings", "Verb"]

def __getattr__(name: str):
	if name == "ClientSession":
		from .client_session import ClientSession
		return ClientSession
	if name == "Command":
		from .command import Command
		return Command
	if name == "Verb":
		from .command import Verb
		return Verb
	if name == "FtpServer":
		from .ftp_server import FtpServer
		return FtpServer
	if name == "SessionTable":
		from .session_table import SessionTable
		return SessionTable
	if name == "Settings":
		from .settings import Settings
		return Settings
	raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__():
	return __all__
