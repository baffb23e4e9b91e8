pytest_plugins = ["fixtures.w3", "fixtures.general"]
