[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sbcpanel"
version = "0.1.0"
description = "Status LEDs, network monitoring and a long-press shutdown button for single-board computers"
requires-python = ">=3.10"
dependencies = [
    "pyzmq",
]
keywords = ["gpio", "sysfs", "led", "raspberry-pi", "sbc", "zeromq", "monitoring"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sbcpanel = "sbcpanel.app:main"

[tool.hatch.build.targets.wheel]
packages = ["sbcpanel"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
