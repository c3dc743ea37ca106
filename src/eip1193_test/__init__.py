def __getattr__(name: str):
    if name in ("LocalClientConfig", "DEFAULT_TEST_ACCOUNTS", "DEFAULT_TEST_CHAIN_ID"):
        import eip1193_test.config as config_module

        return getattr(config_module, name)

    import eip1193_test.client as module

    return getattr(module, name)


__all__ = [
    "DEFAULT_TEST_ACCOUNTS",
    "DEFAULT_TEST_CHAIN_ID",
    "LocalClient",
    "LocalClientConfig",
]
