# setup.py
"""Setup script for Workflow Editor."""

from setuptools import setup, find_packages

setup(
    name="workflow-editor",
    version="1.0.0",
    packages=find_packages(include=["workflow_editor", "workflow_editor.*", "cli", "cli.*"]),
    include_package_data=True,
    install_requires=[
        "click>=8.0",
        "pyyaml>=6.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "structlog>=23.0",
        "fastapi>=0.100",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "httpx>=0.24",  # For fastapi.testclient
            "black>=23.0",
            "flake8>=6.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "workflow-editor=cli.main:cli",
            "wfe=cli.main:cli",  # Short alias
        ],
    },
    python_requires=">=3.8",
)
