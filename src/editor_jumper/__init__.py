# Editor Jumper: open the current file and cursor position in an external IDE
# Main module initialization

__version__ = "0.1.0"


def _is_port_in_use(host: str, port: int) -> bool:
    import socket
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(0.5)
        return s.connect_ex((host, port)) == 0


def _find_available_port(host: str, start_port: int, tries: int = 10) -> int | None:
    for port in range(start_port, start_port + max(1, tries)):
        if not _is_port_in_use(host, port):
            return port
    return None


def serve(host: str | None = None, port: int | None = None, app_settings=None) -> None:
    """Run the HTTP API with uvicorn, moving to a nearby port if the default is taken."""
    import uvicorn

    from .config import get_config
    from .main import app

    if app_settings is not None:
        app.state.settings = app_settings
    app_settings = app_settings or get_config()
    host = host or app_settings.host
    if port is not None:
        # Explicit port: no fallback
        if _is_port_in_use(host, port):
            raise SystemExit(f"Port {port} is already in use. Aborting.")
    else:
        desired = app_settings.port
        port = _find_available_port(host, desired, tries=10)
        if port is None:
            raise SystemExit(f"No available port found near {desired}. Aborting.")

    uvicorn.run(app, host=host, port=port, reload=False)


def main() -> None:
    """Server entry point."""
    serve()
