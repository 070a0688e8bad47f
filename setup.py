# setup.py
from setuptools import find_packages, setup

setup(
    name="luna",
    version="0.1.0",
    description="A Scheme (R7RS-small subset) interpreter with a language server",
    packages=find_packages(include=["luna", "luna.*", "luna_lsp", "luna_lsp.*"]),
    package_data={"luna": ["prelude/*.scm"]},
    python_requires=">=3.10",
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "luna=luna.cli:main",
            "luna-ls=luna_lsp.__main__:main",
        ],
    },
    zip_safe=False,
)
