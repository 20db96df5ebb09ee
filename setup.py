# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="deploykit",
    version="0.1.0",
    description="Deployment workflow helpers: dependency closure copy, config export and ABI generation",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["deploykit", "deploykit.*"]),
    package_data={
        "deploykit.interface": ["locales/*.json"],
    },
    python_requires=">=3.8",
    install_requires=[
        "py-solc-x",  # Version-pinned solc installs for the ABI generator
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'deploykit=deploykit.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
