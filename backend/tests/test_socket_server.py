import socketio

from smalltalk.realtime.server import create_socket_server, resolve_cors_origins


def test_wildcard_origin_collapses_to_string():
    assert resolve_cors_origins(["http://localhost:3000", "*"]) == "*"


def test_origins_are_deduplicated_in_order():
    origins = ["http://localhost:3000", "", "https://chat.example", "http://localhost:3000"]
    assert resolve_cors_origins(origins) == ["http://localhost:3000", "https://chat.example"]


def test_create_socket_server_is_asgi():
    server = create_socket_server(["*"], ping_interval=5)
    assert isinstance(server, socketio.AsyncServer)
    assert server.eio.async_mode == "asgi"
