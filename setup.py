"""
Setup script for learnerdash.

learnerdash is a terminal client for the LMS learner dashboard. It keeps the
learner's bearer token locally and talks to the platform API to show:

1. Profile greeting - who is logged in
2. Bookmarks - saved courses, toggled optimistically
3. Notifications - unread items with the server's unread badge
4. Interests - locally saved categories and their catalog courses
5. Course detail - description, pricing and curriculum

The 'learnerdash' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="learnerdash",
    version="1.0.0",
    description="Terminal learner dashboard for the LMS platform",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["learnerdash", "learnerdash.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "learnerdash=learnerdash.cli.dashboard:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="lms dashboard cli education bookmarks notifications",
)
