"""Setup configuration for agent-test tool."""

from setuptools import setup, find_packages

setup(
    name="agent-test",
    version="0.1.0",
    description="Test runner and watcher for LLM agent functions",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.1.0",
        "watchdog>=4.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "agent-test=agent_test.cli:main",
        ],
    },
)
