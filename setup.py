from setuptools import setup, find_packages

setup(
    name="wotscore",
    version="0.1.0",
    description="Web-of-trust scoring for public keys from decentralized attestations",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["pynacl>=1.5.0"],
    extras_require={"dev": ["pytest>=7.0", "pytest-asyncio>=0.21"]},
    python_requires=">=3.9",
    license="CC0-1.0",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries",
        "License :: CC0 1.0 Universal (CC0 1.0) Public Domain Dedication",
        "Programming Language :: Python :: 3",
    ],
    keywords="web-of-trust attestation reputation nostr trust-score",
)
