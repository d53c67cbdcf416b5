[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mqttv5codec"
version = "0.1.0"
description = "Encoding and decoding of MQTT version 5 control packets"
requires-python = ">=3.10"
dependencies = []
keywords = ["mqtt", "mqttv5", "protocol", "codec", "iot"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mqttv5codec"]

[tool.pytest.ini_options]
addopts = "-ra"
