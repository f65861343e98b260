from setuptools import setup, find_namespace_packages

setup(
    name="gutenberg_reader_sync",
    version="0.1.0",
    packages=find_namespace_packages(include=['cli*', 'reader_sync*']),
    include_package_data=True,
    package_data={
        "reader_sync": ["data/*.csv"],
    },
    python_requires=">=3.11",
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "requests",
        "lxml",
        "Babel",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "reader-sync=cli.main:main",
        ],
    },
)
