[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ocm-common"
version = "0.1.0"
description = "Small shared helpers: random labels, passwords, a generic state machine and a validating SQL WHERE-clause parser."
requires-python = ">=3.10"
dependencies = []
keywords = ["sql", "parser", "state machine", "scanner", "tokenizer", "where clause", "filter"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ocm_common"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
