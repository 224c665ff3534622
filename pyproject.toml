[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scalpquant"
version = "0.1.0"
description = "Quantitative sizing, risk, signal research and rule-based scalping strategies for crypto trading"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "trading",
    "crypto",
    "kelly",
    "value-at-risk",
    "kalman",
    "hidden-markov-model",
    "information-coefficient",
    "walk-forward",
    "scalping",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Financial and Insurance Industry",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["scalpquant"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
