[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "certident"
version = "0.1.0"
description = "OIDC identity extraction and request helpers for a code-signing certificate authority"
requires-python = ">=3.10"
dependencies = []
keywords = ["oidc", "jwt", "identity", "code-signing", "spiffe", "kubernetes", "wsgi"]
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
    "Topic :: Security",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["certident"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
