"""Setup configuration for the chatmod chat moderation bot."""

from setuptools import setup, find_packages

setup(
    name="chatmod",
    version="0.0.1",
    description="First-message moderation and text commands for IRC-style chat",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "aiosqlite",
        "prompt_toolkit",
        "python-dotenv",
        "PyYAML",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "chatmod=chatmod.main:main",
        ],
    },
)
