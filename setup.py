"""Setup configuration for Synduct Insights package."""

from setuptools import setup, find_namespace_packages

setup(
    name="synduct-insights",
    version="1.0.0",
    description="Filterable analytics over anonymized physician Q&A interactions",
    author="Synduct",
    author_email="",
    packages=find_namespace_packages(include=["src*", "config*", "api*", "scripts*"]),
    package_data={"config": ["*.yaml"]},
    python_requires=">=3.11",
    install_requires=[
        "pandas>=2.1.0",
        "numpy>=1.26.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
        "fastapi>=0.110.0",
        "pydantic>=2.6.0",
        "pydantic-settings>=2.2.0",
        "uvicorn>=0.27.0",
    ],
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.26.0",
            "black>=24.1.0",
            "ruff>=0.2.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "synduct-report=scripts.signal_report:main",
        ],
    },
)
