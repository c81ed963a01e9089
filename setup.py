"""Setup configuration for drawsite-e2e package."""

from setuptools import setup, find_namespace_packages

setup(
    name="drawsite-e2e",
    version="0.1.0",
    description="Browser-driven end-to-end suite for a prize-draw storefront",
    packages=find_namespace_packages(include=["src", "src.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0",
        "playwright>=1.40.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "pytest-mock>=3.11.0",
            "ruff>=0.1.0",
            "mypy>=1.5.0",
            "black>=23.0.0",
        ],
    },
)
