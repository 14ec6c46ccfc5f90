"""
Setup script for permwatch capability monitor.
"""

from setuptools import setup, find_packages

setup(
    name="permwatch",
    version="0.1.0",
    description="Live monitoring of OS capability grants with display-scoped polling",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Permwatch Team",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "macos": [
            "pyobjc-framework-ApplicationServices>=10.0",
            "pyobjc-framework-AVFoundation>=10.0",
            "pyobjc-framework-Cocoa>=10.0",
            "pyobjc-framework-Quartz>=10.0",
        ],
        "windows": [
            "comtypes>=1.2.0",
        ],
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "permwatch=permwatch.main:cli",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
