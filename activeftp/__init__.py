__version__ = "0.1.0"

__all__ = ["FtpServer", "Settings"]

def __getattr__(name: str):
	if name == "FtpServer":
		from .entities.ftp_server import FtpServer
		return FtpServer
	if name == "Settings":
		from .entities.settings import Settings
		return Settings
	raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__():
	return __all__
