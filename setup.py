from setuptools import setup, find_packages


setup(
    name="gitpdf",
    version="0.1",
    packages=find_packages(include=["gitpdf", "gitpdf.*"]),
    description="Embed an encrypted, compressed git bundle in a PDF attachment and recover it.",
    author="gitpdf contributors",
    install_requires=[
        "pycryptodomex>=3.23.0",
        "argon2-cffi>=23.1.0",
        "pypdf>=4.0.0",
        "reportlab>=4.0.0",
    ],
    entry_points={
        "console_scripts": [
            "gitpdf=gitpdf.cli:main",
        ]
    },
)
