"""Setup configuration for CostLens SDK."""

from pathlib import Path

from setuptools import setup, find_packages

readme = Path(__file__).parent / "README.md"
long_description = readme.read_text(encoding="utf-8") if readme.exists() else ""

setup(
    name="costlens-sdk",
    version="0.1.0",
    author="CostLens Team",
    author_email="team@costlens.dev",
    description="Cost-aware wrapper for OpenAI and Anthropic clients: routing, caching, fallback and run tracking",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/costlens/costlens-sdk-python",
    packages=find_packages(include=["costlens_sdk", "costlens_sdk.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "openai>=1.0.0",
        "anthropic>=0.18.0",
        "httpx>=0.24.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "costlens=costlens_sdk.cli:main",
        ],
    },
)
