[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "codevalley"
version = "0.1.0"
description = "Data model, configuration, database setup and HTTP application shell for a farming-and-coding life simulation game."
requires-python = ">=3.10"
keywords = ["game", "simulation", "asgi", "starlette", "sqlalchemy", "rpg"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "sqlalchemy>=2.0",
    "python-dotenv>=1.0",
    "starlette>=0.37",
    "uvicorn>=0.27",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "httpx>=0.25",
]

[project.scripts]
codevalley = "codevalley.app:main"

[tool.hatch.build.targets.wheel]
packages = ["codevalley"]

[tool.hatch.build.targets.sdist]
include = ["codevalley", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
