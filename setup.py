"""
Setup script for the weak-ties project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

from version import __version__

setup(
    name="weak-ties",
    version=__version__,
    packages=find_packages(include=["src", "src.*", "api_service", "api_service.*"]),
    py_modules=["version"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "python-multipart>=0.0.9",
        "pydantic>=2.6",
        "pydantic-settings>=2.2",
        "python-dotenv>=1.0",
        "requests>=2.31",
        "langchain-core>=0.2",
        "langchain-openai>=0.1",
        "json-repair>=0.25",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
        ],
    },
)
