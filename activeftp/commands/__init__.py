__all__ = ["handle_user", "handle_pass", "handle_pwd", "handle_syst", "handle_type",
           "handle_port", "handle_list", "handle_retr"]

def __getattr__(name: str):
    if name == "handle_user":
        from ._user import handle_user
        return handle_user
    if name == "handle_pass":
        from ._pass import handle_pass
        return handle_pass
    if name == "handle_pwd":
        from ._pwd import handle_pwd
        return handle_pwd
    if name == "handle_syst":
        from ._syst import handle_syst
        return handle_syst
    if name == "handle_type":
        from ._type import handle_type
        return handle_type
    if name == "handle_port":
        from ._port import handle_port
        return handle_port
    if name == "handle_list":
        from ._list import handle_list
        return handle_list
    if name == "handle_retr":
        from ._retr import handle_retr
        return handle_retr
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__():
    return __all__
