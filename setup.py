"""Setup configuration for jobretry."""

from setuptools import setup, find_packages

setup(
    name="jobretry",
    version="1.0.0",
    description="Retry coordination and plugin hooks for background job queues",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        "click>=8.1.7",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "redis>=5.0.0",
        "python-json-logger>=3.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "jobretry=jobretry.cli:cli",
        ],
    },
    python_requires=">=3.8",
)
