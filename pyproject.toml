[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arry"
version = "0.1.0"
description = "A small WSGI web framework with a radix-tree router, middlewares and pluggable template engines"
requires-python = ">=3.10"
dependencies = [
    "jinja2",
]
keywords = ["web", "framework", "wsgi", "router", "radix-tree", "middleware", "templates"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["arry"]

[tool.pytest.ini_options]
addopts = "-ra"
