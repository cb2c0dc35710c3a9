from setuptools import setup, find_packages

setup(
    name="sharecheck",
    version="1.0.0",
    description="SMB file-content check plugin for competition scoring engines",
    packages=find_packages(include=["sharecheck", "sharecheck.*"]),
    install_requires=[
        "smbprotocol",
        "pyyaml",
        "colorama",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "sharecheck=sharecheck.cli:main",
        ],
    },
    python_requires=">=3.8",
)
