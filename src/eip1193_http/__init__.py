def __getattr__(name: str):
    if name == "HTTPClientConfig":
        from eip1193_http.config import HTTPClientConfig

        return HTTPClientConfig

    import eip1193_http.client as module

    return getattr(module, name)


__all__ = [
    "HTTPClient",
    "HTTPClientConfig",
]
