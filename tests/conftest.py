pytest_plugins = ["codecommit_lifecycle.testing.conftest"]
