"""Package setup for pwa_precache."""

from setuptools import setup, find_packages

setup(
    name="pwa-precache",
    version="1.0.0",
    description="Service-worker precache manifest builder for web applications",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "pwa_precache": [
            "resources/*.js",
            "resources/icons/*",
            "resources/front/lib/*",
        ],
    },
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
        "beautifulsoup4>=4.12.0",
        "lxml>=5.0.0",
        "urllib3>=2.0.0",
        "colorlog>=6.8.0",
        "tree-sitter>=0.23.0",
        "tree-sitter-javascript>=0.23.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pwa-precache=pwa_precache.cli:main",
        ],
    },
)
